"""Error types raised by the invoicing services."""


class InvoicingError(Exception):
    """Base class for invoicing failures."""


class PreconditionFailed(InvoicingError):
    """Caller-fixable input problem; nothing has been written."""


class InvoiceNotFound(PreconditionFailed):
    def __init__(self, invoice_id):
        super().__init__(f"Invoice {invoice_id} not found")
        self.invoice_id = invoice_id


class RecordStoreFailure(InvoicingError):
    """A create/update/delete against the database failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message


class MailDeliveryError(InvoicingError):
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
