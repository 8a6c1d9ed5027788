from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from invoicedesk.db.base import Base
from invoicedesk.db.session import SessionLocal, engine
from invoicedesk.main import app
from invoicedesk.models.client import Client
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.user import User
from invoicedesk.services.reports import get_invoice_summary, time_frame_start

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _seed(db):
    user = User(email="reports@example.com", hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    acme = Client(user_id=user.id, name="Acme")
    globex = Client(user_id=user.id, name="Globex")
    db.add_all([acme, globex])
    db.commit()
    rows = [
        (acme, "1", Decimal("100.00"), datetime(2024, 6, 14, 9, 0, tzinfo=timezone.utc)),
        (acme, "2", Decimal("50.00"), datetime(2024, 6, 14, 17, 0, tzinfo=timezone.utc)),
        (globex, "3", Decimal("200.00"), datetime(2024, 6, 2, 9, 0, tzinfo=timezone.utc)),
        (globex, "4", Decimal("999.00"), datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc)),
    ]
    for client, number, total, created_at in rows:
        db.add(Invoice(user_id=user.id, client_id=client.id, invoice_number=number, total=total, created_at=created_at))
    db.commit()
    return user


def test_time_frame_start():
    assert time_frame_start("7days", NOW) == datetime(2024, 6, 8, 12, 0, tzinfo=timezone.utc)
    assert time_frame_start("month", NOW) == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert time_frame_start("year", NOW) == datetime(2024, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        time_frame_start("decade", NOW)


def test_summary_for_last_thirty_days():
    with SessionLocal() as db:
        user = _seed(db)
        summary = get_invoice_summary(db, user.id, "30days", now=NOW)

    assert summary["total_invoices"] == 3
    assert summary["total_amount"] == "350.00"
    assert summary["average_invoice_value"] == "116.67"
    assert [c["name"] for c in summary["top_clients"]] == ["Globex", "Acme"]
    assert summary["top_clients"][1]["total_invoices"] == 2
    assert summary["daily"] == [
        {"date": "2024-06-02", "amount": "200.00", "count": 1},
        {"date": "2024-06-14", "amount": "150.00", "count": 2},
    ]


def test_summary_for_seven_days_and_year():
    with SessionLocal() as db:
        user = _seed(db)
        week = get_invoice_summary(db, user.id, "7days", now=NOW)
        year = get_invoice_summary(db, user.id, "year", now=NOW)

    assert week["total_invoices"] == 2
    assert week["top_clients"][0]["name"] == "Acme"
    assert year["total_invoices"] == 4
    assert year["total_amount"] == "1349.00"


def test_empty_summary():
    with SessionLocal() as db:
        summary = get_invoice_summary(db, 999, "month", now=NOW)
    assert summary["total_invoices"] == 0
    assert summary["average_invoice_value"] == "0.00"
    assert summary["top_clients"] == []


def test_summary_endpoint_validates_time_frame():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "rep@example.com", "password": "secret"})
    token = client.post("/auth/login", json={"email": "rep@example.com", "password": "secret"}).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    resp = client.get("/reports/summary", params={"time_frame": "year"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["total_invoices"] == 0
    assert client.get("/reports/summary", params={"time_frame": "decade"}, headers=headers).status_code == 400
