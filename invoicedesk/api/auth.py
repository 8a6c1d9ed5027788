"""Account routes: sign-up, token login and the current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from invoicedesk.core.security import create_access_token, get_current_user, get_password_hash, verify_password
from invoicedesk.db.session import get_db
from invoicedesk.models.user import User
from invoicedesk.schemas.user import LoginRequest, UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _find_user(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


@router.post("/register", response_model=UserRead)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    if _find_user(db, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    account = User(
        email=payload.email,
        full_name=payload.full_name,
        hashed_password=get_password_hash(payload.password),
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info("Registered user %s", account.id)
    return account


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    account = _find_user(db, payload.email)
    # Same answer for unknown email, missing hash and wrong password
    if account is None or not account.hashed_password or not verify_password(payload.password, account.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not account.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    return {"access_token": create_access_token(user_id=account.id), "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
