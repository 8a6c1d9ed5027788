# InvoiceDesk backend entrypoint: clients, invoices, settings, PDFs and mail.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoicedesk.api import auth
from invoicedesk.api import clients
from invoicedesk.api import invoices
from invoicedesk.api import mail
from invoicedesk.api import reports
from invoicedesk.api import settings as settings_routes
from invoicedesk.core.logging import configure_logging
from invoicedesk.core.settings import get_settings
from invoicedesk.db.base import Base
from invoicedesk.db.session import engine

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(settings_routes.router)
app.include_router(invoices.router)
app.include_router(mail.router)
app.include_router(reports.router)


@app.get("/")
def read_root():
    return {"app": "InvoiceDesk backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
