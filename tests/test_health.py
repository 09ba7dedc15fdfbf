"""Smoke tests for the health endpoints and the error envelope."""
from __future__ import annotations

from salon_agenda import create_app
from salon_agenda.config import TestingConfig


def test_health_endpoint() -> None:
    app = create_app(TestingConfig)
    client = app.test_client()

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json == {"status": "ok"}


def test_db_health(client) -> None:
    response = client.get("/api/db-health")

    assert response.status_code == 200
    assert response.json == {"database": "ok"}


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert set(response.get_json()) == {"error"}


def test_create_app_accepts_mapping() -> None:
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "API_PREFIX": "/v1"})

    response = app.test_client().get("/v1/health")

    assert response.status_code == 200
