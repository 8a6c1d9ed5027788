"""Invoice routes."""

import base64
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from invoicedesk.core.errors import (
    InvoiceNotFound,
    InvoicingError,
    MailDeliveryError,
    PreconditionFailed,
    RecordStoreFailure,
)
from invoicedesk.core.security import get_current_user
from invoicedesk.core.settings import get_settings
from invoicedesk.crud.crud_business_settings import business_settings_crud
from invoicedesk.crud.crud_invoice import invoice_crud
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.email import EmailAttachment, EmailRequest, EmailResponse
from invoicedesk.schemas.invoice import (
    InvoiceBulkDelete,
    InvoicePreviewRequest,
    InvoicePreviewResponse,
    InvoiceRead,
    InvoiceSendRequest,
    InvoiceWrite,
)
from invoicedesk.services import invoice_sequencer
from invoicedesk.services.invoice_pdf import pdf_filename, render_invoice_pdf
from invoicedesk.services.mailer import (
    DEFAULT_BODY_TEMPLATE,
    DEFAULT_SUBJECT_TEMPLATE,
    SmtpConfig,
    render_email_template,
    send_email,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _http_error(exc: InvoicingError) -> HTTPException:
    if isinstance(exc, InvoiceNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    if isinstance(exc, PreconditionFailed):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, RecordStoreFailure):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _get_owned_invoice(db: Session, invoice_id: int, user_id: int):
    invoice = invoice_crud.get(db, invoice_id=invoice_id, user_id=user_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


@router.get("", response_model=List[InvoiceRead])
async def list_invoices(
    q: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_crud.get_multi(db, user_id=current_user.id, search=q)


@router.post("/preview", response_model=InvoicePreviewResponse)
async def preview_invoice(
    payload: InvoicePreviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    settings = business_settings_crud.get(db, user_id=current_user.id)
    total = invoice_sequencer.invoice_total(payload.items)
    return InvoicePreviewResponse(
        invoice_number=invoice_sequencer.next_invoice_number(settings),
        total=total,
        formatted_total=invoice_sequencer.format_currency(total, payload.currency),
    )


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceWrite,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    settings = business_settings_crud.get(db, user_id=current_user.id)
    try:
        invoice = invoice_sequencer.create_invoice(
            db,
            payload.client_id,
            payload.items,
            current_user.id,
            settings,
            atomic=get_settings().atomic_invoice_numbering,
        )
    except InvoicingError as exc:
        raise _http_error(exc)
    return _get_owned_invoice(db, invoice.id, current_user.id)


@router.post("/bulk-delete")
async def bulk_delete_invoices(
    payload: InvoiceBulkDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        deleted = invoice_sequencer.delete_invoices(db, payload.ids, current_user.id)
    except InvoicingError as exc:
        raise _http_error(exc)
    return {"deleted": deleted}


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(db, invoice_id, current_user.id)


@router.put("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(
    invoice_id: int,
    payload: InvoiceWrite,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return invoice_sequencer.update_invoice(db, invoice_id, payload.client_id, payload.items, current_user.id)
    except InvoicingError as exc:
        raise _http_error(exc)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    try:
        invoice_sequencer.delete_invoice(db, invoice_id, current_user.id)
    except InvoicingError as exc:
        raise _http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    settings = business_settings_crud.get(db, user_id=current_user.id)
    content = render_invoice_pdf(invoice, settings)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(invoice)}"'},
    )


@router.post("/{invoice_id}/send", response_model=EmailResponse)
def send_invoice(
    invoice_id: int,
    payload: InvoiceSendRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = _get_owned_invoice(db, invoice_id, current_user.id)
    settings = business_settings_crud.get(db, user_id=current_user.id)
    client = invoice.client
    recipient = payload.to or (client.email if client else None)
    if not recipient:
        raise HTTPException(status_code=400, detail="Client has no email address")

    business_name = (settings.business_name if settings else None) or ""
    context = {
        "invoice_number": invoice.invoice_number,
        "client_name": (client.name if client else "") or "",
        "total": invoice_sequencer.format_currency(invoice.total, client.currency if client else None),
        "business_name": business_name,
    }
    subject_template = (settings.email_subject_template if settings else None) or DEFAULT_SUBJECT_TEMPLATE
    body_template = (settings.email_body_template if settings else None) or DEFAULT_BODY_TEMPLATE

    pdf_bytes = render_invoice_pdf(invoice, settings)
    request = EmailRequest(
        to=recipient,
        cc=payload.cc,
        bcc=payload.bcc,
        subject=payload.subject or render_email_template(subject_template, context),
        text=payload.text or render_email_template(body_template, context),
        attachments=[
            EmailAttachment(
                filename=pdf_filename(invoice),
                content=base64.b64encode(pdf_bytes).decode("ascii"),
                content_type="application/pdf",
            )
        ],
        business_name=business_name or None,
    )
    try:
        return send_email(request, SmtpConfig.from_settings(get_settings(), settings))
    except MailDeliveryError as exc:
        return JSONResponse(status_code=500, content={"success": False, "message": exc.message})
