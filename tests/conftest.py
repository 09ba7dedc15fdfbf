"""pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure the project root is available on sys.path so tests can import the package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from salon_agenda import create_app  # noqa: E402
from salon_agenda.config import TestingConfig  # noqa: E402
from salon_agenda.credentials import CredentialStore  # noqa: E402
from salon_agenda.extensions import db  # noqa: E402
from salon_agenda.security import issue_token  # noqa: E402

PASSWORD = "secret1"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    """A database session inside an app context, for store-level tests."""
    with app.app_context():
        yield db.session


@pytest.fixture
def make_user(app):
    """Create an account directly in the store and return it with auth headers."""

    def _make_user(username: str, role: str = "user", password: str = PASSWORD) -> SimpleNamespace:
        with app.app_context():
            store = CredentialStore(db.session)
            if role == "admin" and not store.setup_complete():
                user = store.setup_admin(username, password)
            else:
                creator = next((u.id for u in store.list_users() if u.is_admin), None)
                user = store.create_user(username, password, role=role, created_by=creator)
            return SimpleNamespace(
                id=user.id,
                username=user.username,
                role=user.role,
                headers={"Authorization": f"Bearer {issue_token(user)}"},
            )

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("admin", role="admin")


@pytest.fixture
def alice(make_user, admin):
    return make_user("alice")


@pytest.fixture
def bob(make_user, admin):
    return make_user("bob")


@pytest.fixture
def seed(client):
    """Create a client, a service and a staff member through the API."""

    def _seed(headers: dict[str, str]) -> SimpleNamespace:
        customer = client.post(
            "/api/clients", json={"name": "Lucía", "phone": "600111222"}, headers=headers
        ).get_json()
        service = client.post(
            "/api/services",
            json={"name": "Corte", "durationMinutes": 30, "priceCents": 1500},
            headers=headers,
        ).get_json()
        member = client.post(
            "/api/staff", json={"name": "Marta", "specialties": ["corte"]}, headers=headers
        ).get_json()
        return SimpleNamespace(client_id=customer["id"], service_id=service["id"], staff_id=member["id"])

    return _seed


@pytest.fixture
def book(client):
    """Book an appointment through the API and return its JSON."""

    def _book(headers: dict[str, str], refs: SimpleNamespace, **fields) -> dict[str, object]:
        payload = {
            "date": "2026-03-10",
            "time": "10:00",
            "clientId": refs.client_id,
            "serviceId": refs.service_id,
            "staffId": refs.staff_id,
            **fields,
        }
        response = client.post("/api/appointments", json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _book
