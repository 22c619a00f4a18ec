"""Pytest configuration and fixtures."""

import os

# must be set before carledger is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@example.com"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import carledger.models  # noqa: E402,F401
from carledger.utils.database import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture
def db():
    """Fresh schema for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db) -> TestClient:
    return TestClient(app)


@pytest.fixture
def purchase_date() -> datetime:
    """Loan origination used across loan tests."""
    return datetime(2024, 1, 15)


def auth(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def make_user(client):
    def _make(email: str, name: str = "Test User") -> int:
        resp = client.post("/users/", json={"email": email, "name": name})
        assert resp.status_code == 201, resp.text
        return resp.json()["user_id"]

    return _make


@pytest.fixture
def owner_id(make_user) -> int:
    return make_user("owner@example.com", "Owner")


@pytest.fixture
def other_id(make_user) -> int:
    return make_user("other@example.com", "Other")


@pytest.fixture
def admin_id(make_user) -> int:
    return make_user("Admin@Example.com", "Admin")


@pytest.fixture
def make_car(client):
    def _make(user_id: int, **overrides) -> int:
        body = {"make": "Toyota", "model": "Corolla", "year": 2022}
        body.update(overrides)
        resp = client.post("/cars/", json=body, headers=auth(user_id))
        assert resp.status_code == 201, resp.text
        return resp.json()["car_id"]

    return _make


@pytest.fixture
def car_id(make_car, owner_id) -> int:
    return make_car(owner_id)


@pytest.fixture
def add_expense(client):
    def _add(user_id: int, car_id: int, amount, when: str, category: str = "loan_payment", **extra):
        body = {
            "car_id": car_id,
            "category": category,
            "description": extra.pop("description", "Loan payment"),
            "amount": amount,
            "expense_date": when,
        }
        body.update(extra)
        resp = client.post("/expenses/", json=body, headers=auth(user_id))
        assert resp.status_code == 201, resp.text
        return resp.json()["expense_id"]

    return _add


@pytest.fixture
def set_loan(client):
    def _set(user_id: int, car_id: int, purchase_date: str = "2024-01-15T00:00:00", **terms):
        loan = {"loan_amount": 1200, "loan_term": 12, "interest_rate": 0, "monthly_payment": 100}
        loan.update(terms)

        if purchase_date is not None:
            resp = client.put(
                f"/cars/{car_id}/purchase", json={"purchase_date": purchase_date}, headers=auth(user_id)
            )
            assert resp.status_code == 200, resp.text

        resp = client.put(f"/cars/{car_id}/loan", json=loan, headers=auth(user_id))
        assert resp.status_code == 200, resp.text

    return _set
