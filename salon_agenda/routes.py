"""HTTP routes: health checks, authentication and user administration."""
from __future__ import annotations

from flask import Blueprint, Flask, current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import policy
from .credentials import CredentialStore
from .errors import UnauthenticatedError, ValidationError
from .extensions import db
from .security import current_identity, issue_token

bp = Blueprint("api", __name__)


def json_payload() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("El cuerpo de la petición debe ser un objeto JSON")
    return payload


def _credentials() -> CredentialStore:
    return CredentialStore(db.session)


@bp.get("/health")
def health_check() -> tuple[dict[str, str], int]:
    """
    Expose a simple uptime check endpoint.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is healthy and running.
    """
    return jsonify({"status": "ok"}), 200


@bp.get("/db-health")
def database_health() -> tuple[dict[str, str], int]:
    """Check connectivity to the configured database."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        current_app.logger.exception("Database connectivity check failed", exc_info=exc)
        return jsonify({"database": "unavailable"}), 500

    return jsonify({"database": "ok"}), 200


# --- Authentication ---


@bp.get("/auth/status")
def auth_status() -> tuple[dict[str, bool], int]:
    """Tell the frontend whether the first admin still has to be created."""
    return jsonify({"setupComplete": _credentials().setup_complete()}), 200


@bp.post("/auth/setup")
def setup() -> tuple[dict[str, object], int]:
    """Create the first admin account. Only works while no admin exists.
    ---
    tags:
      - Authentication
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            username:
              type: string
              minLength: 3
            password:
              type: string
              minLength: 6
    responses:
      200:
        description: Admin created, returns user and token
      400:
        description: Already configured, or invalid fields
    """
    payload = json_payload()
    user = _credentials().setup_admin(payload.get("username"), payload.get("password"))
    return jsonify({"user": user.to_dict_basic(), "token": issue_token(user)}), 200


@bp.post("/auth/login")
def login() -> tuple[dict[str, object], int]:
    """Authenticate a user by username/password and return an access token.
    ---
    tags:
      - Authentication
    responses:
      200:
        description: Login successful, returns access token
      400:
        description: Missing username or password
      401:
        description: Invalid credentials
    """
    payload = json_payload()
    username = payload.get("username")
    password = payload.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ValidationError("Usuario y contraseña requeridos")

    identity = _credentials().verify_credentials(username, password)
    if identity is None:
        raise UnauthenticatedError("Usuario o contraseña incorrectos")

    return jsonify({"user": identity.to_dict(), "token": issue_token(identity)}), 200


@bp.get("/auth/me")
def me() -> tuple[dict[str, object], int]:
    return jsonify({"user": current_identity().to_dict()}), 200


@bp.post("/auth/register")
def register_user() -> tuple[dict[str, object], int]:
    """Create a user account (admin only).
    ---
    tags:
      - Authentication
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            username:
              type: string
            password:
              type: string
            role:
              type: string
              enum: [admin, user]
    responses:
      201:
        description: User created
      400:
        description: Invalid payload or username already exists
      403:
        description: Caller is not an admin
    """
    caller = current_identity()
    policy.enforce(
        policy.can_manage_users(caller, reason="Solo el administrador puede crear usuarios")
    )

    payload = json_payload()
    user = _credentials().create_user(
        payload.get("username"),
        payload.get("password"),
        role=payload.get("role") or "user",
        created_by=caller.id,
    )
    return jsonify(user.to_dict_basic()), 201


# --- User administration (admin only) ---


@bp.get("/users")
def list_users() -> tuple[list[dict[str, object]], int]:
    caller = current_identity()
    policy.enforce(policy.can_manage_users(caller))
    return jsonify([user.to_dict() for user in _credentials().list_users()]), 200


@bp.delete("/users/<user_id>")
def delete_user(user_id: str) -> tuple[dict[str, bool], int]:
    """Delete a user who owns no services, staff, clients or appointments.
    ---
    tags:
      - Users
    responses:
      200:
        description: User deleted
      400:
        description: Self-deletion, or the user still owns records
      403:
        description: Caller is not an admin
      404:
        description: User not found
    """
    caller = current_identity()
    policy.enforce(policy.can_manage_users(caller))
    _credentials().delete_user(user_id, caller.id)
    return jsonify({"success": True}), 200


@bp.put("/users/<user_id>/password")
def update_user_password(user_id: str) -> tuple[dict[str, object], int]:
    caller = current_identity()
    policy.enforce(policy.can_manage_users(caller))

    _credentials().update_password(user_id, json_payload().get("password"))
    return jsonify({"success": True, "message": "Contraseña actualizada correctamente"}), 200


def register_routes(app: Flask) -> None:
    from .routes_catalog import bp_catalog

    prefix = app.config.get("API_PREFIX", "")
    app.register_blueprint(bp, url_prefix=prefix)
    app.register_blueprint(bp_catalog, url_prefix=prefix)
