"""
Test fixtures: in-memory database, API client and two registered companies
"""
import os

# Must be set before the app is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-pytest-only-0123456789"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.database import Base, get_db
from app.main import app


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Test client with get_db bound to the in-memory database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email, company_name, password="secret123", role=None):
    payload = {
        "email": email,
        "password": password,
        "firstName": "Test",
        "lastName": "Owner",
        "companyName": company_name,
    }
    if role:
        payload["role"] = role
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "token": body["token"],
        "user": body["user"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def company_a(client):
    """Admin of the first tenant."""
    return register(client, "alice@acme.com", "Acme Corp")


@pytest.fixture
def company_b(client):
    """Admin of a second, unrelated tenant."""
    return register(client, "bob@globex.com", "Globex Inc")


@pytest.fixture
def auth_headers(company_a):
    return company_a["headers"]


@pytest.fixture
def make_customer(client):
    def _make(headers, name="Acme Buyer", **fields):
        response = client.post("/api/customers", json={"name": name, **fields}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_supplier(client):
    def _make(headers, name="Parts Supplier", **fields):
        response = client.post("/api/suppliers", json={"name": name, **fields}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_product(client):
    counter = {"n": 0}

    def _make(headers, **fields):
        counter["n"] += 1
        payload = {
            "name": f"Widget {counter['n']}",
            "sku": f"SKU-{counter['n']:03d}",
            "price": 100,
            "costPrice": 60,
            "gstRate": 18,
        }
        payload.update(fields)
        response = client.post("/api/products", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_warehouse(client):
    def _make(headers, name="Main Warehouse", **fields):
        response = client.post("/api/inventory/warehouses", json={"name": name, **fields}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_employee(client):
    counter = {"n": 0}

    def _make(headers, **fields):
        counter["n"] += 1
        payload = {
            "employeeId": f"EMP-{counter['n']:03d}",
            "firstName": "Priya",
            "lastName": "Sharma",
            "email": f"employee{counter['n']}@acme.com",
            "dateOfJoining": "2024-01-15",
            "salary": 50000,
        }
        payload.update(fields)
        response = client.post("/api/employees", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def make_account(client):
    def _make(headers, code="1000", name="Cash", type="ASSET", **fields):
        response = client.post(
            "/api/accounts",
            json={"code": code, "name": name, "type": type, **fields},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make
