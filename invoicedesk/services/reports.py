"""Invoice summary figures for the reports page."""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session, selectinload

from invoicedesk.models.invoice import Invoice

TIME_FRAMES = ("7days", "30days", "month", "year")


def _money(value: Decimal) -> str:
    return str(Decimal(value).quantize(Decimal("0.01")))


def time_frame_start(time_frame: str, now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    if time_frame == "7days":
        return now - timedelta(days=7)
    if time_frame == "30days":
        return now - timedelta(days=30)
    if time_frame == "month":
        return datetime(now.year, now.month, 1, tzinfo=now.tzinfo)
    if time_frame == "year":
        return datetime(now.year, 1, 1, tzinfo=now.tzinfo)
    raise ValueError(f"Unsupported time frame: {time_frame}")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def get_invoice_summary(db: Session, user_id: int, time_frame: str = "30days", now: datetime | None = None) -> dict:
    """Totals, per-client revenue and per-day revenue for invoices in the window."""
    since = time_frame_start(time_frame, now)
    invoices = [
        invoice
        for invoice in db.query(Invoice)
        .options(selectinload(Invoice.client))
        .filter(Invoice.user_id == user_id)
        .order_by(Invoice.created_at.asc())
        .all()
        if _as_utc(invoice.created_at) >= since
    ]

    total_amount = sum((Decimal(str(inv.total or 0)) for inv in invoices), Decimal("0.00"))
    average = total_amount / len(invoices) if invoices else Decimal("0.00")

    clients: dict = {}
    daily: dict = defaultdict(lambda: {"amount": Decimal("0.00"), "count": 0})
    for invoice in invoices:
        amount = Decimal(str(invoice.total or 0))
        entry = clients.setdefault(
            invoice.client_id,
            {"name": invoice.client.name if invoice.client else "", "count": 0, "amount": Decimal("0.00")},
        )
        entry["count"] += 1
        entry["amount"] += amount
        day = _as_utc(invoice.created_at).date().isoformat()
        daily[day]["amount"] += amount
        daily[day]["count"] += 1

    top_clients = sorted(clients.items(), key=lambda pair: pair[1]["amount"], reverse=True)
    return {
        "time_frame": time_frame,
        "total_invoices": len(invoices),
        "total_amount": _money(total_amount),
        "average_invoice_value": _money(average),
        "top_clients": [
            {
                "client_id": client_id,
                "name": data["name"],
                "total_invoices": data["count"],
                "total_amount": _money(data["amount"]),
            }
            for client_id, data in top_clients
        ],
        "daily": [
            {"date": day, "amount": _money(data["amount"]), "count": data["count"]}
            for day, data in sorted(daily.items())
        ],
    }
