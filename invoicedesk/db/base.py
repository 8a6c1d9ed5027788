from invoicedesk.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from invoicedesk.models.user import User  # noqa: F401
from invoicedesk.models.client import Client  # noqa: F401
from invoicedesk.models.business_settings import BusinessSettings  # noqa: F401
from invoicedesk.models.invoice import Invoice  # noqa: F401
from invoicedesk.models.invoice_item import InvoiceItem  # noqa: F401
