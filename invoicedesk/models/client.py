"""Client model: the party an invoice is billed to."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from invoicedesk.core.time import utc_now
from invoicedesk.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    client_address = Column(Text, nullable=True)
    tax_number = Column(String(100), nullable=True)
    tax_type = Column(String(50), nullable=True)
    # Free-text display symbol ("$", "€", "RM"); never converted
    currency = Column(String(10), nullable=False, default="$")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    owner = relationship("User", back_populates="clients")
    invoices = relationship("Invoice", back_populates="client")
