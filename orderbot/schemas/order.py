from enum import Enum
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List, Optional

# Defaults for slots the customer did not say
DEFAULT_CUSTOMER = "ลูกค้าไม่ระบุ"
DEFAULT_UNIT = "ชิ้น"
DEFAULT_DELIVERY = "ไม่ระบุ"


class OrderStatus(str, Enum):
    PENDING = "รอดำเนินการ"  # Initial state written to the orders sheet


class OutcomeStatus(str, Enum):
    NOT_UNDERSTOOD = "not_understood"
    INSUFFICIENT_STOCK = "insufficient_stock"
    ACCEPTED = "accepted"


def _utc_timestamp() -> str:
    # Same shape as JavaScript's toISOString(): 2024-01-31T09:15:00.123Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderIntent(BaseModel):
    """Structured purchase request extracted from one utterance."""
    customer: str = Field(DEFAULT_CUSTOMER, min_length=1)
    item: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit: str = Field(DEFAULT_UNIT, min_length=1)
    delivery_method: str = Field(DEFAULT_DELIVERY, min_length=1)


class StockRecord(BaseModel):
    """One row of the stock sheet. A missing row reads as zero stock at zero price."""
    item: str
    unit: str
    stock: int = 0
    price: int = 0
    row_number: Optional[int] = None  # 1-based sheet row, None when no row matched


class OrderRecord(BaseModel):
    """One row of the orders sheet."""
    order_no: int = 0
    timestamp: str = Field(default_factory=_utc_timestamp)
    customer: str
    item: str
    quantity: int
    unit: str
    delivery_method: str
    status: OrderStatus = OrderStatus.PENDING
    total: int

    def to_row(self) -> List:
        """Positional layout of the orders sheet (columns A..K, G and J unused)."""
        return [
            self.order_no,
            self.timestamp,
            self.customer,
            self.item,
            self.quantity,
            self.unit,
            "",
            self.delivery_method,
            self.status.value,
            "",
            self.total,
        ]


class OrderOutcome(BaseModel):
    """Result of running one utterance through the order workflow."""
    status: OutcomeStatus
    reply: str
    order: Optional[OrderRecord] = None


class OrderTextRequest(BaseModel):
    """Schema for placing an order from plain text over HTTP."""
    text: str = Field(..., min_length=1, description="Utterance, e.g. 'สมชาย สั่ง มะนาว 3 ลูก ส่งโดย Grab'.")
