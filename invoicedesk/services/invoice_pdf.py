"""PDF rendering for invoices (fpdf2)."""

import logging
from typing import Any, Optional

from fpdf import FPDF

from invoicedesk.services.invoice_sequencer import format_currency, parse_price

logger = logging.getLogger(__name__)

# Core PDF fonts only carry latin-1; spell out the common symbols that fall outside it
_SYMBOL_FALLBACKS = {"€": "EUR ", "₹": "INR ", "₱": "PHP ", "₩": "KRW ", "₺": "TRY ", "₦": "NGN "}


def _text(value: Any) -> str:
    text = "" if value is None else str(value)
    for symbol, replacement in _SYMBOL_FALLBACKS.items():
        text = text.replace(symbol, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _line(pdf: FPDF, text: str, height: float = 6, **kwargs) -> None:
    pdf.cell(0, height, _text(text), new_x="LMARGIN", new_y="NEXT", **kwargs)


def render_invoice_pdf(invoice: Any, settings: Optional[Any] = None) -> bytes:
    """Render an invoice (with its client and items loaded) to PDF bytes."""
    client = invoice.client
    symbol = getattr(client, "currency", None)

    pdf = FPDF()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=15)

    # --- Header ---
    pdf.set_font("Helvetica", "B", 24)
    pdf.cell(95, 12, "INVOICE")
    pdf.set_font("Helvetica", "", 10)
    business_lines = []
    if settings is not None:
        business_lines = [
            settings.business_name,
            settings.contact_name,
            settings.business_address,
            settings.contact_phone,
            settings.contact_email,
        ]
        if settings.wise_email:
            business_lines.append(f"WISE: {settings.wise_email}")
        if settings.tax_number:
            business_lines.append(f"Tax No: {settings.tax_number}")
        if settings.registration_number:
            business_lines.append(f"Reg No: {settings.registration_number}")
    first = True
    for entry in business_lines:
        if not entry:
            continue
        if not first:
            pdf.cell(95, 5, "")
        pdf.cell(95, 5, _text(entry), align="R", new_x="LMARGIN", new_y="NEXT")
        first = False
    if first:
        pdf.ln(12)
    pdf.ln(6)

    # --- Invoice details ---
    pdf.set_fill_color(240, 240, 240)
    pdf.set_font("Helvetica", "", 10)
    bill_to = (client.company_name or client.name) if client is not None else ""
    details = [
        ("Invoice No:", invoice.invoice_number),
        ("Bill to:", bill_to),
        ("Address:", client.client_address if client is not None else ""),
    ]
    if client is not None and client.tax_number:
        details.append((f"{client.tax_type or 'Tax'}:", client.tax_number))
    created = invoice.created_at.strftime("%Y-%m-%d") if invoice.created_at else ""
    details.append(("Date:", created))
    for label, value in details:
        pdf.cell(40, 6, _text(label))
        pdf.multi_cell(0, 6, _text(value), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Items ---
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(15, 7, "#", border="B", fill=True)
    pdf.cell(95, 7, "Description", border="B", fill=True)
    pdf.cell(40, 7, "Price", border="B", fill=True, align="R")
    pdf.cell(40, 7, "Amount", border="B", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    for index, item in enumerate(invoice.items, start=1):
        price = format_currency(parse_price(item.price), symbol)
        label = item.name if not item.description else f"{item.name} - {item.description}"
        pdf.cell(15, 6, str(index))
        pdf.cell(95, 6, _text(label))
        pdf.cell(40, 6, _text(price), align="R")
        pdf.cell(40, 6, _text(price), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Total ---
    pdf.set_font("Helvetica", "B", 12)
    pdf.cell(0, 8, _text(f"Total: {format_currency(invoice.total, symbol)}"), align="R", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Payment details ---
    if settings is not None and (settings.bank_name or settings.bank_account_number or settings.bank_iban):
        pdf.set_font("Helvetica", "B", 11)
        _line(pdf, "  Payment Details", height=7, fill=True)
        pdf.set_font("Helvetica", "", 10)
        for label, value in (
            ("Bank", settings.bank_name),
            ("Account name", settings.bank_account_name),
            ("Account number", settings.bank_account_number),
            ("Sort code", settings.bank_sort_code),
            ("SWIFT", settings.bank_swift),
            ("IBAN", settings.bank_iban),
        ):
            if value:
                _line(pdf, f"  {label}: {value}")
        pdf.ln(4)

    # --- Footer ---
    pdf.set_font("Helvetica", "I", 9)
    if settings is not None and settings.invoice_footer_note:
        pdf.multi_cell(0, 5, _text(settings.invoice_footer_note), align="C", new_x="LMARGIN", new_y="NEXT")
    contact = settings.contact_email if settings is not None else ""
    _line(pdf, f"If you have any questions, please contact: {contact or ''}", height=5, align="C")

    data = bytes(pdf.output())
    logger.debug("Rendered invoice %s (%s bytes)", invoice.invoice_number, len(data))
    return data


def pdf_filename(invoice: Any) -> str:
    return f"Invoice-{invoice.invoice_number or 'download'}.pdf"
