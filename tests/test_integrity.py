"""Tests for the referential integrity guard."""
from __future__ import annotations

import pytest

from salon_agenda.credentials import CredentialStore
from salon_agenda.errors import ConflictError, ValidationError
from salon_agenda.integrity import ReferentialGuard
from salon_agenda.stores import AppointmentStore, ClientStore, ServiceStore, StaffStore


@pytest.fixture
def owner(session):
    return CredentialStore(session).setup_admin("ana", "secret1")


@pytest.fixture
def booking(session, owner):
    customer = ClientStore(session).create({"name": "Lucía", "phone": "600111222"}, owner.id)
    service = ServiceStore(session).create(
        {"name": "Corte", "durationMinutes": 30, "priceCents": 1500}, owner.id
    )
    member = StaffStore(session).create({"name": "Marta"}, owner.id)
    refs = {"clientId": customer.id, "serviceId": service.id, "staffId": member.id}
    for hour in ("09:00", "10:00"):
        AppointmentStore(session).create({"date": "2026-03-10", "time": hour, **refs}, owner.id)
    return refs


def test_entities_with_appointments_cannot_be_deleted(session, booking) -> None:
    guard = ReferentialGuard(session)

    for entity_type, key in (("client", "clientId"), ("service", "serviceId"), ("staff", "staffId")):
        check = guard.can_delete(entity_type, booking[key])
        assert not check.allowed
        assert check.dependent_count == 2


def test_unreferenced_entity_can_be_deleted(session, owner) -> None:
    check = ReferentialGuard(session).can_delete("service", "no-appointments")

    assert check.allowed
    assert check.dependent_count == 0


def test_user_breakdown(session, owner, booking) -> None:
    check = ReferentialGuard(session).can_delete("user", owner.id)

    assert not check.allowed
    assert check.dependent_count == 5
    assert check.breakdown == {"servicios": 1, "personal": 1, "clientes": 1, "citas": 2}


def test_ensure_can_delete_carries_count(session, booking) -> None:
    with pytest.raises(ConflictError) as excinfo:
        ReferentialGuard(session).ensure_can_delete("staff", booking["staffId"])

    assert excinfo.value.dependent_count == 2
    assert "tiene 2 cita(s) asociada(s)" in excinfo.value.message


def test_appointments_have_no_dependents(session) -> None:
    assert ReferentialGuard(session).can_delete("appointment", "anything").allowed


def test_unknown_entity_type(session) -> None:
    with pytest.raises(ValidationError):
        ReferentialGuard(session).can_delete("invoice", "x")
