"""CRUD stores for services, staff, clients and appointments.

All four share one shape, implemented once in ``EntityStore``:

* ``create`` validates, stamps ``created_by`` with the caller and saves;
* ``list`` / ``get`` are open to any authenticated caller;
* ``update`` overwrites every writable field (omitted optional fields are
  cleared) once the policy allows it;
* ``delete`` checks the policy and the referential guard and removes the
  row, all in one transaction.
"""
from __future__ import annotations

import logging
import re
from datetime import date, time

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import policy
from .errors import NotFoundError, ValidationError
from .integrity import ReferentialGuard
from .models import APPOINTMENT_STATUSES, Appointment, Client, Service, StaffMember
from .security import Identity
from .transactions import unit_of_work

logger = logging.getLogger(__name__)

_HH_MM = re.compile(r"[0-9]{2}:[0-9]{2}")

# Largest value an INTEGER column holds on every supported backend.
MAX_INTEGER = 2**31 - 1


def _text(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} debe ser texto")
    return value.strip() or None


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(payload: dict, *keys: str) -> None:
    missing = [key for key in keys if _blank(payload.get(key))]
    if missing:
        raise ValidationError(f"Faltan campos requeridos: {', '.join(missing)}")


def _integer(payload: dict, key: str, minimum: int) -> int:
    value = payload.get(key)
    if isinstance(value, bool):
        value = None
    elif isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            value = None
    elif isinstance(value, float) and value.is_integer():
        value = int(value)

    if not isinstance(value, int) or value < minimum:
        if minimum > 0:
            raise ValidationError(f"{key} debe ser un entero positivo")
        raise ValidationError(f"{key} debe ser un entero mayor o igual a {minimum}")
    if value > MAX_INTEGER:
        raise ValidationError(f"{key} no puede superar {MAX_INTEGER}")
    return value


def parse_date(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError("Fecha inválida, usa el formato YYYY-MM-DD") from exc


def parse_time(value) -> time:
    if isinstance(value, time):
        return value
    # Minutes precision only: seconds would be lost when rendered back.
    if not isinstance(value, str) or not _HH_MM.fullmatch(value.strip()):
        raise ValidationError("Hora inválida, usa el formato HH:MM")
    try:
        return time.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError("Hora inválida, usa el formato HH:MM") from exc


class EntityStore:
    model = None
    entity_type = ""
    not_found_message = "Registro no encontrado"

    def __init__(self, session: Session) -> None:
        self.session = session
        self.guard = ReferentialGuard(session)

    def clean(self, payload: dict) -> dict[str, object]:
        """Validate ``payload`` and return the column values to write."""
        raise NotImplementedError

    def ordering(self) -> tuple:
        return (self.model.name, self.model.id)

    def list(self) -> list:
        with unit_of_work(self.session, f"list {self.entity_type}"):
            stmt = select(self.model).order_by(*self.ordering())
            return list(self.session.execute(stmt).scalars())

    def _load(self, entity_id: str, for_update: bool = False):
        stmt = select(self.model).where(self.model.id == entity_id)
        if for_update:
            # Row lock on backends that support it; SQLite serializes writers anyway.
            stmt = stmt.with_for_update()
        entity = self.session.execute(stmt).scalar_one_or_none()
        if entity is None:
            raise NotFoundError(self.not_found_message)
        return entity

    def get(self, entity_id: str):
        with unit_of_work(self.session, f"read {self.entity_type}"):
            return self._load(entity_id)

    def create(self, payload: dict, caller_id: str):
        with unit_of_work(
            self.session,
            f"create {self.entity_type}",
            conflict_message="El registro hace referencia a datos que ya no existen",
        ):
            entity = self.model(**self.clean(payload), created_by=caller_id)
            self.session.add(entity)
            self.session.flush()
            entity_id = entity.id
        logger.info("%s %s created by %s", self.entity_type, entity_id, caller_id)
        return entity

    def update(self, entity_id: str, payload: dict, caller: Identity):
        with unit_of_work(self.session, f"update {self.entity_type}"):
            entity = self._load(entity_id, for_update=True)
            policy.enforce(policy.can_modify(caller, entity, "update"))
            for column, value in self.clean(payload).items():
                setattr(entity, column, value)
        return entity

    def delete(self, entity_id: str, caller: Identity) -> None:
        with unit_of_work(
            self.session,
            f"delete {self.entity_type}",
            conflict_message="No se puede eliminar: tiene registros asociados.",
        ):
            entity = self._load(entity_id, for_update=True)
            policy.enforce(policy.can_modify(caller, entity, "delete"))
            self.guard.ensure_can_delete(self.entity_type, entity.id)
            self.session.delete(entity)
        logger.info("%s %s deleted by %s", self.entity_type, entity_id, caller.id)


class ServiceStore(EntityStore):
    model = Service
    entity_type = "service"
    not_found_message = "Servicio no encontrado"

    def clean(self, payload: dict) -> dict[str, object]:
        _require(payload, "name", "durationMinutes", "priceCents")
        return {
            "name": _text(payload, "name"),
            "duration_minutes": _integer(payload, "durationMinutes", minimum=1),
            "price_cents": _integer(payload, "priceCents", minimum=0),
        }


class StaffStore(EntityStore):
    model = StaffMember
    entity_type = "staff"
    not_found_message = "Personal no encontrado"

    def clean(self, payload: dict) -> dict[str, object]:
        _require(payload, "name")
        specialties = payload.get("specialties") or []
        if not isinstance(specialties, list) or not all(isinstance(s, str) for s in specialties):
            raise ValidationError("specialties debe ser una lista de textos")

        # Ordered set: keep the first occurrence of each specialty.
        unique = []
        for specialty in (s.strip() for s in specialties):
            if specialty and specialty not in unique:
                unique.append(specialty)

        return {
            "name": _text(payload, "name"),
            "color": _text(payload, "color"),
            "specialties": unique,
        }


class ClientStore(EntityStore):
    model = Client
    entity_type = "client"
    not_found_message = "Cliente no encontrado"

    def clean(self, payload: dict) -> dict[str, object]:
        _require(payload, "name", "phone")
        return {
            "name": _text(payload, "name"),
            "phone": _text(payload, "phone"),
            "email": _text(payload, "email"),
            "notes": _text(payload, "notes"),
        }


class AppointmentStore(EntityStore):
    model = Appointment
    entity_type = "appointment"
    not_found_message = "Cita no encontrada"

    # Appointment field -> (model it references, message when missing)
    references = {
        "clientId": (Client, "clientId no corresponde a ningún cliente"),
        "serviceId": (Service, "serviceId no corresponde a ningún servicio"),
        "staffId": (StaffMember, "staffId no corresponde a ningún miembro del personal"),
    }

    def ordering(self) -> tuple:
        return (Appointment.date, Appointment.time, Appointment.id)

    def list(self, day: date | str | None = None) -> list:
        if day is None:
            return super().list()

        day = parse_date(day)
        with unit_of_work(self.session, "list appointment"):
            stmt = (
                select(Appointment)
                .where(Appointment.date == day)
                .order_by(Appointment.time, Appointment.id)
            )
            return list(self.session.execute(stmt).scalars())

    def clean(self, payload: dict) -> dict[str, object]:
        _require(payload, "date", "time", "clientId", "serviceId", "staffId")

        for key, (model, message) in self.references.items():
            if not isinstance(payload[key], str) or self.session.get(model, payload[key]) is None:
                raise ValidationError(message)

        status = payload.get("status") or "pending"
        if status not in APPOINTMENT_STATUSES:
            raise ValidationError(
                f"Estado inválido. Valores permitidos: {', '.join(APPOINTMENT_STATUSES)}"
            )

        return {
            "date": parse_date(payload["date"]),
            "time": parse_time(payload["time"]),
            "client_id": payload["clientId"],
            "service_id": payload["serviceId"],
            "staff_id": payload["staffId"],
            "status": status,
            "notes": _text(payload, "notes"),
        }
