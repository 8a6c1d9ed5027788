"""Invoice item schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvoiceItemIn(BaseModel):
    # Editor rows arrive loosely typed; the sequencer validates them
    name: Optional[str] = None
    description: Optional[str] = None
    price: Decimal | float | str | None = None


class InvoiceItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    created_at: datetime
