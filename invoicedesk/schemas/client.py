"""Client schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientBase(BaseModel):
    name: str = Field(min_length=1)
    company_name: Optional[str] = None
    email: Optional[str] = None
    client_address: Optional[str] = None
    tax_number: Optional[str] = None
    tax_type: Optional[str] = None
    currency: str = "$"


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    company_name: Optional[str] = None
    email: Optional[str] = None
    client_address: Optional[str] = None
    tax_number: Optional[str] = None
    tax_type: Optional[str] = None
    currency: Optional[str] = None


class ClientRead(ClientBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime


class ClientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    company_name: Optional[str] = None
    email: Optional[str] = None
    client_address: Optional[str] = None
    tax_number: Optional[str] = None
    tax_type: Optional[str] = None
    currency: Optional[str] = None
