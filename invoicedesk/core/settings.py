import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = "InvoiceDesk"
        self.api_version = "1.0.0"
        self.environment = os.getenv("INVOICEDESK_ENV", "development")
        self.secret_key = os.getenv("INVOICEDESK_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("INVOICEDESK_TOKEN_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("INVOICEDESK_DATABASE_URL", "sqlite:///./invoicedesk.db")
        self.log_level = os.getenv("INVOICEDESK_LOG_LEVEL", "INFO")
        # Allocate invoice numbers with a single UPDATE ... RETURNING instead of read-then-write
        self.atomic_invoice_numbering = _env_bool("INVOICEDESK_ATOMIC_NUMBERING", True)

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "465"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASS", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")
        self.smtp_use_ssl = _env_bool("SMTP_SECURE", True)
        self.max_email_payload_bytes = 90_000_000


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    global _settings_instance
    _settings_instance = None
