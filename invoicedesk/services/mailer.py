"""SMTP mail transport for invoices.

Messages are plain text with optional base64 attachments. SMTP parameters
come from the environment and may be overridden per business.
"""

import base64
import binascii
import logging
import smtplib
from dataclasses import dataclass
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, getaddresses
from string import Formatter
from typing import Any, Dict, List, Optional

from invoicedesk.core.errors import MailDeliveryError
from invoicedesk.schemas.email import EmailAttachment, EmailRequest, EmailResponse

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_TEMPLATE = "Invoice {invoice_number} from {business_name}"
DEFAULT_BODY_TEMPLATE = (
    "Dear {client_name},\n\n"
    "Please find attached invoice {invoice_number} for {total}.\n\n"
    "Kind regards,\n{business_name}"
)


@dataclass
class SmtpConfig:
    host: str
    port: int = 465
    user: str = ""
    password: str = ""
    sender: str = ""
    use_ssl: bool = True
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, app_settings: Any, business_settings: Optional[Any] = None) -> "SmtpConfig":
        """Environment values, overridden by whatever the business has filled in."""

        def pick(override: str, default: Any) -> Any:
            value = getattr(business_settings, override, None) if business_settings is not None else None
            return value if value not in (None, "") else default

        return cls(
            host=pick("smtp_host", app_settings.smtp_host),
            port=int(pick("smtp_port", app_settings.smtp_port)),
            user=pick("smtp_user", app_settings.smtp_user),
            password=pick("smtp_password", app_settings.smtp_password),
            sender=pick("smtp_from", app_settings.smtp_from) or pick("smtp_user", app_settings.smtp_user),
            use_ssl=app_settings.smtp_use_ssl,
        )


class _SafeDict(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render_email_template(template: Optional[str], context: Dict[str, Any]) -> str:
    """Fill ``{placeholder}`` fields; unknown placeholders are left untouched."""
    if not template:
        return ""
    try:
        return Formatter().vformat(template, (), _SafeDict(context))
    except (ValueError, IndexError):
        # Stray braces in user-written templates
        return template


def _decode_attachment(attachment: EmailAttachment) -> MIMEApplication:
    content = attachment.content
    if content.startswith("data:") and "," in content:
        content = content.split(",", 1)[1]
    try:
        payload = base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MailDeliveryError(f"Attachment {attachment.filename} is not valid base64") from exc
    subtype = attachment.content_type.split("/", 1)[-1] if "/" in attachment.content_type else "octet-stream"
    part = MIMEApplication(payload, _subtype=subtype)
    part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
    return part


def build_message(request: EmailRequest, sender: str) -> MIMEMultipart:
    msg = MIMEMultipart()
    from_address = request.from_address or sender
    msg["From"] = formataddr((request.business_name, from_address)) if request.business_name else from_address
    msg["To"] = request.to
    if request.cc:
        msg["Cc"] = request.cc
    msg["Subject"] = request.subject
    msg.attach(MIMEText(request.text or "", "plain", "utf-8"))
    for attachment in request.attachments:
        msg.attach(_decode_attachment(attachment))
    return msg


def _recipients(request: EmailRequest) -> List[str]:
    fields = [value for value in (request.to, request.cc, request.bcc) if value]
    return [address for _, address in getaddresses(fields) if address]


def send_email(request: EmailRequest, smtp: SmtpConfig) -> EmailResponse:
    if not smtp.host:
        raise MailDeliveryError("Mail transport is not configured")
    sender = request.from_address or smtp.sender
    msg = build_message(request, sender)
    recipients = _recipients(request)
    logger.info(
        "Sending email to %s (subject=%r, attachments=%s)", request.to, request.subject, len(request.attachments)
    )

    try:
        if smtp.use_ssl:
            server = smtplib.SMTP_SSL(smtp.host, smtp.port, timeout=smtp.timeout)
        else:
            server = smtplib.SMTP(smtp.host, smtp.port, timeout=smtp.timeout)
        with server:
            if not smtp.use_ssl:
                server.starttls()
            if smtp.user:
                server.login(smtp.user, smtp.password)
            server.sendmail(sender, recipients, msg.as_string())
    except smtplib.SMTPAuthenticationError as exc:
        logger.error("SMTP authentication failed for %s: %s", smtp.user, exc)
        raise MailDeliveryError("Authentication failed - check email credentials", str(exc)) from exc
    except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as exc:
        logger.error("SMTP connection to %s:%s failed: %s", smtp.host, smtp.port, exc)
        raise MailDeliveryError("Network error - check your connection", str(exc)) from exc
    except smtplib.SMTPException as exc:
        logger.exception("Failed to send email to %s", request.to)
        raise MailDeliveryError("Failed to send email", str(exc)) from exc
    except OSError as exc:
        # SMTPException subclasses OSError; plain socket errors only
        logger.error("SMTP connection to %s:%s failed: %s", smtp.host, smtp.port, exc)
        raise MailDeliveryError("Network error - check your connection", str(exc)) from exc

    logger.info("Email sent successfully to %s", request.to)
    return EmailResponse(success=True, message="Email sent successfully!")
