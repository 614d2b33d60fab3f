import logging

from orderbot.schemas.order import OrderIntent, OrderOutcome, OrderRecord, OutcomeStatus
from orderbot.services.ledger import InventoryLedger, OrderRecorder
from orderbot.services.locks import KeyedLock
from orderbot.services.parser import parse_order

log = logging.getLogger(__name__)

NOT_UNDERSTOOD_REPLY = "ไม่เข้าใจคำสั่งค่ะ"


def insufficient_stock_reply(item: str) -> str:
    return f"สต็อก{item}ไม่พอ!"


def confirmation_reply(order: OrderRecord) -> str:
    return (
        f"{order.customer} ค่ะ!\n"
        f"{order.item} {order.quantity}{order.unit} = {order.total}฿\n"
        f"ส่งโดย {order.delivery_method}\n"
        f"รหัส: {order.order_no}"
    )


class OrderWorkflow:
    """
    Parse -> read stock -> check -> record order -> decrement stock -> reply.

    The read-check-write sequence for one (item, unit) runs under a per-key
    lock, so two events for the same product handled by this process cannot
    both pass the stock check on the same reading.
    """

    def __init__(self, ledger: InventoryLedger, recorder: OrderRecorder, locks: KeyedLock = None):
        self.ledger = ledger
        self.recorder = recorder
        self.locks = locks or KeyedLock()

    async def handle_utterance(self, text: str) -> str:
        outcome = await self.process(text)
        return outcome.reply

    async def process(self, text: str) -> OrderOutcome:
        intent = parse_order(text)
        if intent is None:
            log.info(f"Not an order: {text!r}")
            return OrderOutcome(status=OutcomeStatus.NOT_UNDERSTOOD, reply=NOT_UNDERSTOOD_REPLY)
        return await self.place_order(intent)

    async def place_order(self, intent: OrderIntent) -> OrderOutcome:
        """
        Applies an order to the ledger. LedgerError from any step propagates;
        if recording the order fails the stock is left untouched.
        """
        async with self.locks.hold((intent.item, intent.unit)):
            stock = await self.ledger.read_stock(intent.item, intent.unit)

            if stock.stock < intent.quantity:
                log.info(
                    f"Rejected {intent.item}/{intent.unit}: requested {intent.quantity}, available {stock.stock}"
                )
                return OrderOutcome(
                    status=OutcomeStatus.INSUFFICIENT_STOCK,
                    reply=insufficient_stock_reply(intent.item),
                )

            order = OrderRecord(
                customer=intent.customer,
                item=intent.item,
                quantity=intent.quantity,
                unit=intent.unit,
                delivery_method=intent.delivery_method,
                total=stock.price * intent.quantity,
            )
            order_no = await self.recorder.append_order(order)
            order = order.model_copy(update={"order_no": order_no})

            await self.ledger.write_stock(intent.item, intent.unit, stock.stock - intent.quantity)

        log.info(f"Order #{order.order_no} accepted for {order.customer}: total {order.total}")
        return OrderOutcome(status=OutcomeStatus.ACCEPTED, reply=confirmation_reply(order), order=order)
