import asyncio
from typing import List, Optional

from orderbot.core.exceptions import LedgerError
from orderbot.schemas.order import OrderRecord, StockRecord
from orderbot.services.ledger import find_stock_row, to_int


class InMemoryLedger:
    """
    Stand-in for SheetsLedger that keeps both sheets as lists of rows, with
    the same positional layout and first-match rules. Every call yields to the
    event loop once, like a real network round trip, so tests can interleave
    concurrent orders.
    """

    def __init__(self, stock_rows: Optional[List[list]] = None, order_rows: Optional[List[list]] = None):
        self.stock_rows = [list(row) for row in (stock_rows or [])]
        self.order_rows = [list(row) for row in (order_rows or [])]
        self.calls = []
        self.fail_on = set()  # names of methods that should raise LedgerError

    async def _io(self, name):
        self.calls.append(name)
        await asyncio.sleep(0)
        if name in self.fail_on:
            raise LedgerError(f"simulated {name} failure")

    async def read_stock(self, item: str, unit: str) -> StockRecord:
        await self._io("read_stock")
        index = find_stock_row(self.stock_rows, item, unit)
        if index is None:
            return StockRecord(item=item, unit=unit)
        row = self.stock_rows[index] + [None] * (5 - len(self.stock_rows[index]))
        return StockRecord(item=item, unit=unit, stock=to_int(row[3]), price=to_int(row[4]), row_number=index + 1)

    async def write_stock(self, item: str, unit: str, new_stock: int) -> None:
        await self._io("write_stock")
        index = find_stock_row(self.stock_rows, item, unit)
        if index is not None:
            row = self.stock_rows[index]
            row.extend([None] * (5 - len(row)))
            row[3] = new_stock

    async def append_order(self, order: OrderRecord) -> int:
        await self._io("append_order")
        order_no = len(self.order_rows) + 1
        self.order_rows.append(order.model_copy(update={"order_no": order_no}).to_row())
        return order_no

    def stock_of(self, item: str, unit: str) -> Optional[int]:
        index = find_stock_row(self.stock_rows, item, unit)
        if index is None:
            return None
        row = self.stock_rows[index]
        return to_int(row[3]) if len(row) > 3 else 0
