import pytest
from fastapi.testclient import TestClient

from invoicedesk.db.base import Base
from invoicedesk.db.session import engine
from invoicedesk.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> dict:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def test_create_and_get_client():
    client = TestClient(app)
    headers = register_and_login(client, "clients1@example.com", "secret")

    resp = client.post(
        "/clients",
        json={"name": "Acme", "company_name": "Acme Ltd", "tax_number": "GB123", "tax_type": "VAT", "currency": "£"},
        headers=headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["currency"] == "£"

    fetched = client.get(f"/clients/{data['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["tax_type"] == "VAT"


def test_client_currency_defaults_to_dollar():
    client = TestClient(app)
    headers = register_and_login(client, "clients2@example.com", "secret")

    resp = client.post("/clients", json={"name": "Plain"}, headers=headers)
    assert resp.json()["currency"] == "$"


def test_client_name_is_required():
    client = TestClient(app)
    headers = register_and_login(client, "clients3@example.com", "secret")

    assert client.post("/clients", json={"name": ""}, headers=headers).status_code == 422


def test_list_and_search_clients():
    client = TestClient(app)
    headers = register_and_login(client, "clients4@example.com", "secret")
    for name in ("Acme", "Globex", "Initech"):
        client.post("/clients", json={"name": name, "company_name": f"{name} Corp"}, headers=headers)

    listed = client.get("/clients", headers=headers).json()
    assert [c["name"] for c in listed] == ["Initech", "Globex", "Acme"]

    searched = client.get("/clients", params={"q": "glo"}, headers=headers).json()
    assert [c["name"] for c in searched] == ["Globex"]


def test_update_client():
    client = TestClient(app)
    headers = register_and_login(client, "clients5@example.com", "secret")
    created = client.post("/clients", json={"name": "Acme"}, headers=headers).json()

    resp = client.put(f"/clients/{created['id']}", json={"email": "ap@acme.example", "currency": "€"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "ap@acme.example"
    assert resp.json()["currency"] == "€"
    assert resp.json()["name"] == "Acme"


def test_clients_are_owner_scoped():
    client = TestClient(app)
    headers_a = register_and_login(client, "clients6a@example.com", "secret")
    headers_b = register_and_login(client, "clients6b@example.com", "secret")
    created = client.post("/clients", json={"name": "Acme"}, headers=headers_a).json()

    assert client.get("/clients", headers=headers_b).json() == []
    assert client.get(f"/clients/{created['id']}", headers=headers_b).status_code == 404
    assert client.put(f"/clients/{created['id']}", json={"name": "X"}, headers=headers_b).status_code == 404
    assert client.delete(f"/clients/{created['id']}", headers=headers_b).status_code == 404


def test_delete_client_refused_while_invoiced():
    client = TestClient(app)
    headers = register_and_login(client, "clients7@example.com", "secret")
    created = client.post("/clients", json={"name": "Acme"}, headers=headers).json()
    client.put("/settings", json={"business_name": "Studio"}, headers=headers)
    invoice = client.post(
        "/invoices", json={"client_id": created["id"], "items": [{"name": "A", "price": "1"}]}, headers=headers
    ).json()

    assert client.delete(f"/clients/{created['id']}", headers=headers).status_code == 400

    client.delete(f"/invoices/{invoice['id']}", headers=headers)
    assert client.delete(f"/clients/{created['id']}", headers=headers).status_code == 204
    assert client.get(f"/clients/{created['id']}", headers=headers).status_code == 404
