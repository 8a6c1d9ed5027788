from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BusinessSettingsBase(BaseModel):
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    tax_number: Optional[str] = None
    registration_number: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_sort_code: Optional[str] = None
    bank_swift: Optional[str] = None
    bank_iban: Optional[str] = None
    wise_email: Optional[str] = None
    logo_url: Optional[str] = None
    invoice_prefix: Optional[str] = None
    invoice_footer_note: Optional[str] = None
    email_subject_template: Optional[str] = None
    email_body_template: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_from: Optional[str] = None


class BusinessSettingsUpdate(BusinessSettingsBase):
    invoice_number: Optional[int] = Field(default=None, ge=0)
    smtp_password: Optional[str] = None


class BusinessSettingsRead(BusinessSettingsBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    invoice_number: Optional[int] = None
    created_at: datetime
    updated_at: datetime
