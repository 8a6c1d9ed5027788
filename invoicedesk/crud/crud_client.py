"""CRUD operations for clients."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from invoicedesk.crud.base import commit_or_fail
from invoicedesk.models.client import Client
from invoicedesk.models.invoice import Invoice
from invoicedesk.schemas.client import ClientCreate, ClientUpdate


class CRUDClient:
    def create(self, db: Session, *, obj_in: ClientCreate, user_id: int) -> Client:
        obj = Client(user_id=user_id, **obj_in.model_dump())
        db.add(obj)
        commit_or_fail(db, "create_client")
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, client_id: int, user_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id, Client.user_id == user_id).first()

    def get_multi(self, db: Session, *, user_id: int, search: str | None = None) -> List[Client]:
        query = db.query(Client).filter(Client.user_id == user_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Client.name.ilike(pattern), Client.company_name.ilike(pattern), Client.email.ilike(pattern))
            )
        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()

    def update(self, db: Session, *, db_obj: Client, obj_in: ClientUpdate) -> Client:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        commit_or_fail(db, "update_client")
        db.refresh(db_obj)
        return db_obj

    def has_invoices(self, db: Session, *, client_id: int) -> bool:
        return db.query(Invoice.id).filter(Invoice.client_id == client_id).first() is not None

    def delete(self, db: Session, *, db_obj: Client) -> Client:
        db.delete(db_obj)
        commit_or_fail(db, "delete_client")
        return db_obj


client_crud = CRUDClient()
