"""Per-user business settings, including the invoice number counter."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from invoicedesk.core.time import utc_now
from invoicedesk.db.base_class import Base


class BusinessSettings(Base):
    __tablename__ = "business_settings"
    __table_args__ = (UniqueConstraint("user_id", name="uq_business_settings_user"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    business_name = Column(String(255), nullable=True)
    business_address = Column(Text, nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    tax_number = Column(String(100), nullable=True)
    registration_number = Column(String(100), nullable=True)

    bank_name = Column(String(255), nullable=True)
    bank_account_name = Column(String(255), nullable=True)
    bank_account_number = Column(String(100), nullable=True)
    bank_sort_code = Column(String(50), nullable=True)
    bank_swift = Column(String(50), nullable=True)
    bank_iban = Column(String(100), nullable=True)
    wise_email = Column(String(255), nullable=True)
    logo_url = Column(String(512), nullable=True)

    # Last sequence value handed out; NULL reads as 0
    invoice_number = Column(Integer, nullable=True, default=0)
    invoice_prefix = Column(String(50), nullable=True)
    invoice_footer_note = Column(Text, nullable=True)

    email_subject_template = Column(String(255), nullable=True)
    email_body_template = Column(Text, nullable=True)

    smtp_host = Column(String(255), nullable=True)
    smtp_port = Column(Integer, nullable=True)
    smtp_user = Column(String(255), nullable=True)
    smtp_password = Column(String(255), nullable=True)
    smtp_from = Column(String(255), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="business_settings")
