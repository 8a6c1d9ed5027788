"""Shared commit handling for the CRUD objects."""

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from invoicedesk.core.errors import RecordStoreFailure


def commit_or_fail(db: Session, operation: str) -> None:
    """Commit the pending unit of work; roll back and raise RecordStoreFailure on error."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise RecordStoreFailure(operation, str(exc)) from exc


@contextmanager
def store_call(db: Session, operation: str):
    """Run statements that execute immediately (bulk update/delete) as one committed call."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise RecordStoreFailure(operation, str(exc)) from exc
    commit_or_fail(db, operation)
