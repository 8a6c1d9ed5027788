"""Invoice schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from invoicedesk.schemas.client import ClientSummary
from invoicedesk.schemas.invoice_item import InvoiceItemIn, InvoiceItemRead


class InvoiceWrite(BaseModel):
    client_id: Optional[int] = None
    items: List[InvoiceItemIn] = []


class InvoicePreviewRequest(BaseModel):
    items: List[InvoiceItemIn] = []
    currency: Optional[str] = None


class InvoicePreviewResponse(BaseModel):
    invoice_number: str
    total: Decimal
    formatted_total: str


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    client_id: int
    invoice_number: str
    total: Decimal
    created_at: datetime
    client: Optional[ClientSummary] = None
    items: List[InvoiceItemRead] = []


class InvoiceSendRequest(BaseModel):
    to: Optional[str] = None
    cc: Optional[str] = None
    bcc: Optional[str] = None
    subject: Optional[str] = None
    text: Optional[str] = None


class InvoiceBulkDelete(BaseModel):
    ids: List[int]
