"""Invoice numbering, totals, and the create/update/delete sequences."""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session

from invoicedesk.core.errors import InvoiceNotFound, PreconditionFailed
from invoicedesk.core.time import epoch_millis
from invoicedesk.crud.crud_business_settings import business_settings_crud
from invoicedesk.crud.crud_client import client_crud
from invoicedesk.crud.crud_invoice import invoice_crud
from invoicedesk.models.invoice import Invoice
from invoicedesk.services.saga import Saga

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY_SYMBOL = "$"
CENTS = Decimal("0.01")


def _field(obj: Any, name: str, default=None):
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def parse_price(value: Any) -> Decimal:
    """Parse an editor price; anything unparseable or non-finite counts as 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not price.is_finite():
        return Decimal("0")
    return price


def to_cents(price: Decimal) -> Decimal:
    return price.quantize(CENTS, rounding=ROUND_HALF_UP)


def invoice_total(items: Iterable[Any]) -> Decimal:
    """Sum of item prices, each rounded to cents as the store keeps them.

    The editor preview and the stored total both use this.
    """
    return sum((to_cents(parse_price(_field(item, "price"))) for item in items), Decimal("0"))


def format_currency(amount: Any, symbol: Optional[str] = None) -> str:
    # Floats round on their binary value, half away from zero, like toFixed(2)
    value = Decimal(amount) if isinstance(amount, float) else Decimal(str(amount or 0))
    value = to_cents(value)
    return f"{symbol or DEFAULT_CURRENCY_SYMBOL}{value:f}"


def next_invoice_number(settings: Any, now: Optional[float] = None) -> str:
    """Number the next invoice from the settings counter and prefix.

    Without settings the current epoch milliseconds are used so an invoice can
    still be numbered before the business has been configured.
    """
    if settings is None:
        return str(epoch_millis(now))
    candidate = (_field(settings, "invoice_number") or 0) + 1
    prefix = _field(settings, "invoice_prefix")
    return f"{prefix}{candidate}" if prefix else str(candidate)


def _validate_items(items: Optional[List[Any]]) -> List[dict]:
    if not items:
        raise PreconditionFailed("At least one item is required")
    cleaned = []
    for index, item in enumerate(items, start=1):
        name = (_field(item, "name") or "").strip()
        if not name:
            raise PreconditionFailed(f"Item {index} is missing a name")
        raw_price = _field(item, "price")
        if raw_price is None or isinstance(raw_price, bool) or str(raw_price).strip() == "":
            raise PreconditionFailed(f"Item {index} is missing a price")
        try:
            price = Decimal(str(raw_price).strip())
        except (InvalidOperation, ValueError):
            raise PreconditionFailed(f"Item {index} has an invalid price")
        if not price.is_finite() or price < 0:
            raise PreconditionFailed(f"Item {index} has an invalid price")
        cleaned.append({"name": name, "description": _field(item, "description") or "", "price": to_cents(price)})
    return cleaned


def _validate_client(db: Session, client_id: Any, user_id: int) -> None:
    if not client_id:
        raise PreconditionFailed("A client is required")
    if client_crud.get(db, client_id=client_id, user_id=user_id) is None:
        raise PreconditionFailed(f"Client {client_id} not found")


def create_invoice(
    db: Session,
    client_id: int,
    items: List[Any],
    user_id: int,
    settings: Any,
    atomic: bool = False,
) -> Invoice:
    """Create an invoice, consume the next sequence number, and insert its items.

    With ``atomic=False`` the number comes from the ``settings`` snapshot and the
    counter is written back afterwards, so two callers holding the same
    snapshot get the same number. ``atomic=True`` allocates the number with a
    single conditional update before the invoice is inserted.
    """
    _validate_client(db, client_id, user_id)
    cleaned = _validate_items(items)
    if settings is None:
        raise PreconditionFailed("Business settings must be saved before creating invoices")

    total = invoice_total(cleaned)
    saga = Saga("create_invoice")

    if atomic:
        def allocate(ctx):
            counter, prefix = business_settings_crud.allocate_invoice_number(db, user_id=user_id)
            ctx["invoice_number"] = f"{prefix}{counter}" if prefix else str(counter)
            return counter

        saga.add_step("allocate_number", allocate)
    else:
        saga.context["invoice_number"] = next_invoice_number(settings)
        next_counter = (_field(settings, "invoice_number") or 0) + 1

    def insert_invoice(ctx):
        return invoice_crud.create(
            db,
            user_id=user_id,
            client_id=client_id,
            invoice_number=ctx["invoice_number"],
            total=total,
            created_at=datetime.now(timezone.utc),
        )

    def remove_invoice(ctx):
        invoice_crud.delete(db, invoice_id=ctx["insert_invoice"].id)

    saga.add_step("insert_invoice", insert_invoice, compensation=remove_invoice)

    if not atomic:
        saga.add_step(
            "advance_counter",
            lambda ctx: business_settings_crud.set_invoice_counter(db, user_id=user_id, value=next_counter),
            required=False,
        )

    saga.add_step(
        "insert_items",
        lambda ctx: invoice_crud.create_items(
            db, invoice_id=ctx["insert_invoice"].id, user_id=user_id, items=cleaned
        ),
    )

    context = saga.run()
    if "advance_counter" in saga.skipped:
        logger.warning(
            "Invoice %s created but the counter for user %s was not advanced", context["invoice_number"], user_id
        )
    invoice = context["insert_invoice"]
    db.refresh(invoice)
    logger.info("Created invoice %s (%s items) for user %s", invoice.invoice_number, len(cleaned), user_id)
    return invoice


def update_invoice(db: Session, invoice_id: int, client_id: int, items: List[Any], user_id: int) -> Invoice:
    """Reassign the client and replace all items. The invoice number never changes.

    The three writes are not compensated: if replacing the items fails the
    invoice keeps its new client and total with an incomplete item set.
    """
    _validate_client(db, client_id, user_id)
    cleaned = _validate_items(items)
    if invoice_crud.get(db, invoice_id=invoice_id, user_id=user_id) is None:
        raise InvoiceNotFound(invoice_id)

    invoice_crud.update(db, invoice_id=invoice_id, user_id=user_id, client_id=client_id, total=invoice_total(cleaned))
    invoice_crud.delete_items(db, invoice_ids=[invoice_id])
    invoice_crud.create_items(db, invoice_id=invoice_id, user_id=user_id, items=cleaned)

    db.expire_all()
    invoice = invoice_crud.get(db, invoice_id=invoice_id, user_id=user_id)
    logger.info("Updated invoice %s for user %s", invoice.invoice_number, user_id)
    return invoice


def delete_invoices(db: Session, invoice_ids: Iterable[int], user_id: int) -> int:
    """Delete invoices and their items, children first."""
    requested = list(dict.fromkeys(invoice_ids))
    owned = invoice_crud.owned_ids(db, invoice_ids=requested, user_id=user_id)
    missing = [invoice_id for invoice_id in requested if invoice_id not in owned]
    if missing:
        raise InvoiceNotFound(missing[0])
    if not owned:
        return 0

    invoice_crud.delete_items(db, invoice_ids=owned)
    deleted = invoice_crud.delete_many(db, invoice_ids=owned)
    logger.info("Deleted %s invoice(s) for user %s", deleted, user_id)
    return deleted


def delete_invoice(db: Session, invoice_id: int, user_id: int) -> None:
    delete_invoices(db, [invoice_id], user_id)
