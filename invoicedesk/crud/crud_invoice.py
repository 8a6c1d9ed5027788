"""CRUD operations for invoices and their items.

Each write method is a single store call: it commits its own unit of work.
The invoice sequencer strings these calls together and compensates when a
later call fails.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from invoicedesk.core.errors import RecordStoreFailure
from invoicedesk.crud.base import commit_or_fail, store_call
from invoicedesk.models.client import Client
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.invoice_item import InvoiceItem


class CRUDInvoice:
    def create(
        self,
        db: Session,
        *,
        user_id: int,
        client_id: int,
        invoice_number: str,
        total: Decimal,
        created_at: datetime | None = None,
    ) -> Invoice:
        invoice = Invoice(
            user_id=user_id,
            client_id=client_id,
            invoice_number=invoice_number,
            total=total,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(invoice)
        commit_or_fail(db, "create_invoice")
        db.refresh(invoice)
        return invoice

    def get(self, db: Session, *, invoice_id: int, user_id: int) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(selectinload(Invoice.items), selectinload(Invoice.client))
            .filter(Invoice.id == invoice_id, Invoice.user_id == user_id)
            .first()
        )

    def get_multi(self, db: Session, *, user_id: int, search: str | None = None) -> List[Invoice]:
        query = (
            db.query(Invoice)
            .options(selectinload(Invoice.items), selectinload(Invoice.client))
            .filter(Invoice.user_id == user_id)
        )
        if search:
            pattern = f"%{search}%"
            query = query.join(Client, Invoice.client_id == Client.id).filter(
                or_(
                    Client.name.ilike(pattern),
                    Client.company_name.ilike(pattern),
                    Invoice.invoice_number.like(pattern),
                )
            )
        return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    def owned_ids(self, db: Session, *, invoice_ids: Iterable[int], user_id: int) -> List[int]:
        rows = (
            db.query(Invoice.id)
            .filter(Invoice.id.in_(list(invoice_ids)), Invoice.user_id == user_id)
            .all()
        )
        return [row[0] for row in rows]

    def update(self, db: Session, *, invoice_id: int, user_id: int, client_id: int, total: Decimal) -> None:
        with store_call(db, "update_invoice"):
            updated = (
                db.query(Invoice)
                .filter(Invoice.id == invoice_id, Invoice.user_id == user_id)
                .update({Invoice.client_id: client_id, Invoice.total: total}, synchronize_session=False)
            )
            if not updated:
                raise RecordStoreFailure("update_invoice", f"invoice {invoice_id} not found")

    def delete(self, db: Session, *, invoice_id: int) -> None:
        self.delete_many(db, invoice_ids=[invoice_id])

    def delete_many(self, db: Session, *, invoice_ids: Iterable[int]) -> int:
        ids = list(invoice_ids)
        with store_call(db, "delete_invoice"):
            deleted = db.query(Invoice).filter(Invoice.id.in_(ids)).delete(synchronize_session=False)
        return deleted

    def create_items(self, db: Session, *, invoice_id: int, user_id: int, items: Iterable[dict]) -> List[InvoiceItem]:
        rows = [
            InvoiceItem(
                invoice_id=invoice_id,
                user_id=user_id,
                name=item["name"],
                description=item.get("description") or "",
                price=item["price"],
            )
            for item in items
        ]
        db.add_all(rows)
        commit_or_fail(db, "create_invoice_items")
        for row in rows:
            db.refresh(row)
        return rows

    def delete_items(self, db: Session, *, invoice_ids: Iterable[int]) -> int:
        ids = list(invoice_ids)
        with store_call(db, "delete_invoice_items"):
            deleted = (
                db.query(InvoiceItem)
                .filter(InvoiceItem.invoice_id.in_(ids))
                .delete(synchronize_session=False)
            )
        return deleted


invoice_crud = CRUDInvoice()
