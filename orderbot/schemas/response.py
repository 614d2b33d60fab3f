from pydantic import BaseModel, Field
from typing import Any, Optional
import uuid

def _rid():
    return uuid.uuid4().hex

class SuccessResponse(BaseModel):
    """Envelope for every successful JSON response; errors use the same request_id field."""
    success: Optional[bool] = Field(default=True)
    request_id: str = Field(default_factory=_rid)
    message: Optional[str] = None
    data: Optional[Any] = None
