"""Database models for the salon agenda backend."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from .extensions import db

USER_ROLES = ("admin", "user")
APPOINTMENT_STATUSES = ("pending", "confirmed", "completed", "cancelled")


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role", native_enum=False, validate_strings=True),
        nullable=False,
        server_default="user",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    # Plain column: the account that created this one may itself be deleted later.
    created_by = db.Column(db.String(36), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict_basic(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username, "role": self.role}

    def to_dict(self) -> dict[str, object]:
        return {
            **self.to_dict_basic(),
            "createdAt": _isoformat(self.created_at),
            "createdBy": self.created_by,
        }


class Setting(db.Model):
    """Key/value application settings."""

    __tablename__ = "settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text)


class Service(db.Model):
    """Services offered by the salon."""

    __tablename__ = "services"
    label = "servicios"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(150), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "durationMinutes": self.duration_minutes,
            "priceCents": self.price_cents,
            "createdAt": _isoformat(self.created_at),
            "createdBy": self.created_by,
        }


class StaffMember(db.Model):
    __tablename__ = "staff"
    label = "personal"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(20))
    # Stored as a JSON array, ordered as entered.
    specialties = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "specialties": list(self.specialties or []),
            "createdAt": _isoformat(self.created_at),
            "createdBy": self.created_by,
        }


class Client(db.Model):
    __tablename__ = "clients"
    label = "clientes"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    email = db.Column(db.String(255))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "notes": self.notes,
            "createdAt": _isoformat(self.created_at),
            "createdBy": self.created_by,
        }


class Appointment(db.Model):
    """A booked visit: one client, one service, one staff member."""

    __tablename__ = "appointments"
    label = "citas"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    date = db.Column(db.Date, nullable=False, index=True)
    time = db.Column(db.Time, nullable=False)
    client_id = db.Column(db.String(36), db.ForeignKey("clients.id"), nullable=False)
    service_id = db.Column(db.String(36), db.ForeignKey("services.id"), nullable=False)
    staff_id = db.Column(db.String(36), db.ForeignKey("staff.id"), nullable=False)
    status = db.Column(
        db.Enum(
            *APPOINTMENT_STATUSES,
            name="appointment_status",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        server_default="pending",
    )
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time.strftime("%H:%M") if self.time else None,
            "clientId": self.client_id,
            "serviceId": self.service_id,
            "staffId": self.staff_id,
            "status": self.status,
            "notes": self.notes,
            "createdAt": _isoformat(self.created_at),
            "createdBy": self.created_by,
        }
