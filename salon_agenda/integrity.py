"""Referential integrity checks run before physical deletes."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .errors import ConflictError, ValidationError
from .models import Appointment, Client, Service, StaffMember

# Which appointment column points at each entity type.
_APPOINTMENT_REFERENCES = {
    "service": Appointment.service_id,
    "staff": Appointment.staff_id,
    "client": Appointment.client_id,
}

# Records a user owns, in the order they are reported.
_OWNED_MODELS = (Service, StaffMember, Client, Appointment)


@dataclass(frozen=True)
class DeleteCheck:
    allowed: bool
    dependent_count: int
    breakdown: dict[str, int] = field(default_factory=dict)


class ReferentialGuard:
    """Counts the records that would be orphaned by a delete.

    Callers run the check and the delete inside one transaction; see
    ``EntityStore.delete`` and ``CredentialStore.delete_user``.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _count(self, model, column, value: str) -> int:
        stmt = select(func.count()).select_from(model).where(column == value)
        return self.session.execute(stmt).scalar_one()

    def can_delete(self, entity_type: str, entity_id: str) -> DeleteCheck:
        if entity_type == "appointment":
            return DeleteCheck(True, 0)

        if entity_type == "user":
            breakdown = {
                model.label: self._count(model, model.created_by, entity_id)
                for model in _OWNED_MODELS
            }
            total = sum(breakdown.values())
            return DeleteCheck(total == 0, total, breakdown)

        column = _APPOINTMENT_REFERENCES.get(entity_type)
        if column is None:
            raise ValidationError(f"Tipo de entidad desconocido: {entity_type}")

        count = self._count(Appointment, column, entity_id)
        return DeleteCheck(count == 0, count, {Appointment.label: count})

    def ensure_can_delete(self, entity_type: str, entity_id: str) -> DeleteCheck:
        check = self.can_delete(entity_type, entity_id)
        if check.allowed:
            return check

        if entity_type == "user":
            owned = ", ".join(
                f"{count} {label}" for label, count in check.breakdown.items() if count
            )
            raise ConflictError(
                f"No se puede eliminar: el usuario tiene {owned} asociados. "
                "Elimina o reasigna su contenido primero.",
                dependent_count=check.dependent_count,
            )

        raise ConflictError(
            f"No se puede eliminar: tiene {check.dependent_count} cita(s) asociada(s). "
            "Elimina las citas primero.",
            dependent_count=check.dependent_count,
        )
