"""
Utterance parser: turns a Thai chat message into an OrderIntent.

Recognized phrase (one fixed shape, optional parts in brackets):

    [customer] สั่ง item quantity [unit] [ส่งโดย delivery]

e.g. "สมชาย สั่ง มะนาว 3 ลูก ส่งโดย Grab".
"""
import re
from typing import Optional

from orderbot.schemas.order import OrderIntent, DEFAULT_CUSTOMER, DEFAULT_UNIT, DEFAULT_DELIVERY

ORDER_KEYWORD = "สั่ง"
DELIVER_BY_KEYWORD = "ส่งโดย"

_THAI = r"[\u0E00-\u0E7F]+"
_DELIVERY = r"[\u0E00-\u0E7FA-Za-z0-9]+"

ORDER_PATTERN = re.compile(
    rf"(?:(?P<customer>{_THAI})\s+)?"
    rf"{ORDER_KEYWORD}\s*"
    rf"(?P<item>{_THAI})\s*"
    r"(?P<quantity>[0-9]+)\s*"
    rf"(?P<unit>(?:(?!{DELIVER_BY_KEYWORD})[\u0E00-\u0E7F])+)?\s*"
    rf"(?:{DELIVER_BY_KEYWORD}\s*(?P<delivery>{_DELIVERY}))?",
    re.IGNORECASE,
)


def parse_order(text: str) -> Optional[OrderIntent]:
    """
    Returns the OrderIntent for the first match in `text`, or None when the
    message is not an order (no keyword, no item, no quantity, or quantity 0).
    """
    if not text:
        return None
    match = ORDER_PATTERN.search(text)
    if not match:
        return None

    try:
        quantity = int(match.group("quantity"))
    except ValueError:
        # digit run beyond the interpreter's int conversion limit
        return None
    if quantity <= 0:
        return None

    return OrderIntent(
        customer=match.group("customer") or DEFAULT_CUSTOMER,
        item=match.group("item"),
        quantity=quantity,
        unit=match.group("unit") or DEFAULT_UNIT,
        delivery_method=match.group("delivery") or DEFAULT_DELIVERY,
    )
