"""Client routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from invoicedesk.core.errors import RecordStoreFailure
from invoicedesk.core.security import get_current_user
from invoicedesk.crud.crud_client import client_crud
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.client import ClientCreate, ClientRead, ClientUpdate

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_owned_client(db: Session, client_id: int, user_id: int):
    client = client_crud.get(db, client_id=client_id, user_id=user_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.get("", response_model=List[ClientRead])
async def list_clients(
    q: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_crud.get_multi(db, user_id=current_user.id, search=q)


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return client_crud.create(db, obj_in=payload, user_id=current_user.id)
    except RecordStoreFailure as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message)


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_client(db, client_id, current_user.id)


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = _get_owned_client(db, client_id, current_user.id)
    try:
        return client_crud.update(db, db_obj=client, obj_in=payload)
    except RecordStoreFailure as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = _get_owned_client(db, client_id, current_user.id)
    if client_crud.has_invoices(db, client_id=client.id):
        raise HTTPException(status_code=400, detail="Client has invoices; delete them first")
    try:
        client_crud.delete(db, db_obj=client)
    except RecordStoreFailure as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
