"""Password hashing and bearer-token helpers."""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app, request
from itsdangerous import BadData, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import UnauthenticatedError
from .extensions import db
from .models import User

TOKEN_SALT = "auth-token"


@dataclass(frozen=True)
class Identity:
    """The acting user, as proven by a verified credential."""

    id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username, "role": self.role}


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user: User | Identity) -> str:
    return _serializer().dumps({"id": user.id, "username": user.username, "role": user.role})


def decode_token(token: str) -> Identity:
    """Verify the signature and age of ``token`` and return its identity."""
    try:
        payload = _serializer().loads(token, max_age=current_app.config["TOKEN_MAX_AGE"])
    except BadData as exc:
        # Covers bad signatures, expiry and undecodable payloads.
        raise UnauthenticatedError("Token inválido o expirado") from exc

    if not isinstance(payload, dict) or not payload.get("id"):
        raise UnauthenticatedError("Token inválido o expirado")

    return Identity(
        id=str(payload["id"]),
        username=str(payload.get("username", "")),
        role=str(payload.get("role", "user")),
    )


def current_identity() -> Identity:
    """Authenticate the current request from its ``Authorization`` header.

    The token's user is re-loaded so that deleted accounts lose access
    immediately and the stored role is the one that counts.
    """
    auth_header = request.headers.get("Authorization", "")

    if not auth_header.startswith("Bearer "):
        raise UnauthenticatedError("Token no proporcionado")

    claimed = decode_token(auth_header[7:].strip())

    user = db.session.get(User, claimed.id)
    if user is None:
        raise UnauthenticatedError("Token inválido o expirado")

    return Identity(id=user.id, username=user.username, role=user.role)
