"""Logging setup for the InvoiceDesk backend."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "invoicedesk"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stream handler to the ``invoicedesk`` logger tree."""
    logger = logging.getLogger("invoicedesk")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
