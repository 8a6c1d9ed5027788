from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invoicedesk.core.errors import RecordStoreFailure
from invoicedesk.core.security import get_current_user
from invoicedesk.crud.crud_business_settings import business_settings_crud
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.business_settings import BusinessSettingsRead, BusinessSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=BusinessSettingsRead)
async def get_business_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    settings = business_settings_crud.get(db, user_id=current_user.id)
    if settings is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business settings not configured")
    return settings


@router.put("", response_model=BusinessSettingsRead)
async def save_business_settings(
    payload: BusinessSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    existing = business_settings_crud.get(db, user_id=current_user.id)
    if existing is not None and payload.invoice_number is not None:
        if payload.invoice_number < (existing.invoice_number or 0):
            raise HTTPException(status_code=400, detail="Invoice number cannot be lowered")
    try:
        return business_settings_crud.upsert(db, user_id=current_user.id, obj_in=payload)
    except RecordStoreFailure as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message)
