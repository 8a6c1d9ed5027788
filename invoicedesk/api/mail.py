"""Mail relay endpoint used by the dashboard to deliver invoices."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from invoicedesk.core.errors import MailDeliveryError
from invoicedesk.core.security import get_current_user
from invoicedesk.core.settings import get_settings
from invoicedesk.crud.crud_business_settings import business_settings_crud
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.email import EmailRequest, EmailResponse
from invoicedesk.services.mailer import SmtpConfig, send_email

router = APIRouter(tags=["mail"])


@router.post("/send-email", response_model=EmailResponse)
def relay_email(
    payload: EmailRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    app_settings = get_settings()
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > app_settings.max_email_payload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Payload size too large. Please reduce the size of attachments.",
        )
    if not payload.to or not payload.subject:
        raise HTTPException(status_code=400, detail="Missing required fields")

    business = business_settings_crud.get(db, user_id=current_user.id)
    try:
        return send_email(payload, SmtpConfig.from_settings(app_settings, business))
    except MailDeliveryError as exc:
        return JSONResponse(status_code=500, content={"success": False, "message": exc.message})
