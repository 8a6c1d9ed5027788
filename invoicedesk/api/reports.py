"""Report endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from invoicedesk.core.security import get_current_user
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.reports import InvoiceSummary
from invoicedesk.services.reports import TIME_FRAMES, get_invoice_summary

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/summary", response_model=InvoiceSummary)
async def invoice_summary(
    time_frame: str = "30days",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if time_frame not in TIME_FRAMES:
        raise HTTPException(status_code=400, detail="Invalid time_frame value")
    return get_invoice_summary(db, current_user.id, time_frame)
