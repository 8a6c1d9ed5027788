"""CRUD operations for per-user business settings."""

from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from invoicedesk.core.errors import RecordStoreFailure
from invoicedesk.crud.base import commit_or_fail, store_call
from invoicedesk.models.business_settings import BusinessSettings
from invoicedesk.schemas.business_settings import BusinessSettingsUpdate


class CRUDBusinessSettings:
    def get(self, db: Session, *, user_id: int) -> Optional[BusinessSettings]:
        return db.query(BusinessSettings).filter(BusinessSettings.user_id == user_id).first()

    def upsert(self, db: Session, *, user_id: int, obj_in: BusinessSettingsUpdate) -> BusinessSettings:
        settings = self.get(db, user_id=user_id)
        if settings is None:
            settings = BusinessSettings(user_id=user_id, invoice_number=0)
            db.add(settings)
        for field, value in obj_in.model_dump(exclude_unset=True).items():
            if field == "invoice_number" and value is None:
                continue
            setattr(settings, field, value)
        commit_or_fail(db, "upsert_business_settings")
        db.refresh(settings)
        return settings

    def set_invoice_counter(self, db: Session, *, user_id: int, value: int) -> None:
        """Write the last-used invoice sequence value for a user."""
        with store_call(db, "advance_invoice_counter"):
            updated = (
                db.query(BusinessSettings)
                .filter(BusinessSettings.user_id == user_id)
                .update({BusinessSettings.invoice_number: value}, synchronize_session=False)
            )
            if not updated:
                raise RecordStoreFailure("advance_invoice_counter", f"no business settings for user {user_id}")

    def allocate_invoice_number(self, db: Session, *, user_id: int) -> Tuple[int, Optional[str]]:
        """Increment the counter in one statement and return (new value, prefix)."""
        table = BusinessSettings.__table__
        stmt = (
            table.update()
            .where(table.c.user_id == user_id)
            .values(invoice_number=func.coalesce(table.c.invoice_number, 0) + 1)
            .returning(table.c.invoice_number, table.c.invoice_prefix)
        )
        with store_call(db, "allocate_invoice_number"):
            row = db.execute(stmt).first()
            if row is None:
                raise RecordStoreFailure("allocate_invoice_number", f"no business settings for user {user_id}")
        return row[0], row[1]


business_settings_crud = CRUDBusinessSettings()
