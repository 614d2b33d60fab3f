"""
Stock and order ledger backed by a Google Sheets document.

Two fixed, positional ranges are used:

* stock sheet  (A:E) -> item, unit, (unused), stock, price
* orders sheet (A:K) -> orderNo, timestamp, customer, item, quantity, unit,
                        (unused), deliveryMethod, status, (unused), total

Row 1 is treated as data like every other row. Lookups are a linear scan and
the first exact (item, unit) match wins.
"""
import asyncio
import logging
import re
from typing import Any, Callable, List, Optional, Protocol

from orderbot.core.exceptions import LedgerError
from orderbot.schemas.order import OrderRecord, StockRecord

log = logging.getLogger(__name__)

STOCK_COLUMN = "D"
VALUE_INPUT_OPTION = "USER_ENTERED"
# Raw numbers, not the display text ("1,000" would otherwise read as 1)
VALUE_RENDER_OPTION = "UNFORMATTED_VALUE"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_GROUPING = re.compile(r"[,_\s]")


class InventoryLedger(Protocol):
    async def read_stock(self, item: str, unit: str) -> StockRecord: ...

    async def write_stock(self, item: str, unit: str, new_stock: int) -> None: ...


class OrderRecorder(Protocol):
    async def append_order(self, order: OrderRecord) -> int: ...


def to_int(value: Any) -> int:
    """
    Lenient cell-to-int. Grouping separators are ignored ("1,000" is 1000),
    then leading digits are used; anything else reads as 0.
    """
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(_GROUPING.sub("", str(value or "")))
    return int(match.group(1)) if match else 0


def find_stock_row(rows: List[List[Any]], item: str, unit: str) -> Optional[int]:
    """Index (0-based) of the first row whose item and unit match exactly."""
    for index, row in enumerate(rows):
        if len(row) >= 2 and row[0] == item and row[1] == unit:
            return index
    return None


class SheetsLedger:
    """
    Implements both InventoryLedger and OrderRecorder against one spreadsheet.

    `service` is a googleapiclient Sheets v4 resource (or None when credentials
    are missing, in which case every call raises LedgerError). The client is
    blocking, so each request runs in a worker thread. httplib2 transports are
    not thread-safe: when `http_factory` is given, every request executes on a
    fresh transport from it instead of the one shared by `service`.
    """

    def __init__(self, service, spreadsheet_id: Optional[str], stock_range: str, orders_range: str,
                 http_factory: Optional[Callable[[], Any]] = None):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.stock_range = stock_range
        self.orders_range = orders_range
        self.http_factory = http_factory
        self._orders_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return self.service is not None and bool(self.spreadsheet_id)

    def _values(self):
        if not self.configured:
            raise LedgerError("Sheets ledger is not configured (missing SHEET_ID or Google credentials).")
        return self.service.spreadsheets().values()

    async def _execute(self, request, action: str):
        try:
            if self.http_factory is None:
                return await asyncio.to_thread(request.execute)
            return await asyncio.to_thread(request.execute, http=self.http_factory())
        except Exception as e:
            log.error(f"Sheets {action} failed: {e}")
            raise LedgerError(f"Sheets {action} failed: {e}") from e

    async def _get_rows(self, range_name: str) -> List[List[Any]]:
        request = self._values().get(
            spreadsheetId=self.spreadsheet_id,
            range=range_name,
            valueRenderOption=VALUE_RENDER_OPTION,
        )
        result = await self._execute(request, f"read of {range_name}")
        return result.get("values", []) or []

    async def read_stock(self, item: str, unit: str) -> StockRecord:
        rows = await self._get_rows(self.stock_range)
        index = find_stock_row(rows, item, unit)
        if index is None:
            log.info(f"No stock row for {item}/{unit}, treating as empty.")
            return StockRecord(item=item, unit=unit)

        row = rows[index] + [None] * (5 - len(rows[index]))
        return StockRecord(
            item=item,
            unit=unit,
            stock=to_int(row[3]),
            price=to_int(row[4]),
            row_number=index + 1,
        )

    async def write_stock(self, item: str, unit: str, new_stock: int) -> None:
        # Re-scan: the row may have moved since it was read
        rows = await self._get_rows(self.stock_range)
        index = find_stock_row(rows, item, unit)
        if index is None:
            log.warning(f"Stock row for {item}/{unit} disappeared before update; skipping write.")
            return

        sheet = self.stock_range.split("!")[0]
        request = self._values().update(
            spreadsheetId=self.spreadsheet_id,
            range=f"{sheet}!{STOCK_COLUMN}{index + 1}",
            valueInputOption=VALUE_INPUT_OPTION,
            body={"values": [[new_stock]]},
        )
        await self._execute(request, f"stock update of {item}/{unit}")
        log.info(f"Stock for {item}/{unit} set to {new_stock} (row {index + 1}).")

    async def append_order(self, order: OrderRecord) -> int:
        # Count and append under one lock so concurrent orders never share a number
        async with self._orders_lock:
            rows = await self._get_rows(self.orders_range)
            order_no = len(rows) + 1
            row = order.model_copy(update={"order_no": order_no}).to_row()
            request = self._values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self.orders_range,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [row]},
            )
            await self._execute(request, "order append")
        log.info(f"Order #{order_no} recorded: {order.item} x{order.quantity} {order.unit}.")
        return order_no
