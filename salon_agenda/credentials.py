"""User accounts: bootstrap, login verification and administration."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import ConflictError, NotFoundError, ValidationError
from .integrity import ReferentialGuard
from .models import USER_ROLES, Setting, User, utc_now
from .security import Identity, hash_password, verify_password
from .transactions import unit_of_work

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
SETUP_SETTING_KEY = "setup_complete"
ALREADY_CONFIGURED = "El sistema ya está configurado"
USERNAME_TAKEN = "El nombre de usuario ya existe"


def _check_password(password) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
        )
    return password


def _check_username(username) -> str:
    username = username.strip() if isinstance(username, str) else ""
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"El usuario debe tener al menos {MIN_USERNAME_LENGTH} caracteres"
        )
    return username


class CredentialStore:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.guard = ReferentialGuard(session)

    def setup_complete(self) -> bool:
        """True once at least one admin account exists."""
        stmt = select(User.id).where(User.role == "admin").limit(1)
        return self.session.execute(stmt).first() is not None

    def verify_credentials(self, username: str, password: str) -> Identity | None:
        user = self.session.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

        if user is None or not verify_password(user.password_hash, password):
            logger.warning("Failed login attempt for username %r", username)
            return None

        return Identity(id=user.id, username=user.username, role=user.role)

    def _add_user(self, username: str, password: str, role: str, created_by: str | None) -> User:
        exists = self.session.execute(
            select(User.id).where(User.username == username)
        ).first()
        if exists:
            raise ConflictError(USERNAME_TAKEN)

        user = User(
            username=username,
            password_hash=hash_password(password),
            role=role,
            created_by=created_by,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def create_user(
        self,
        username: str,
        password: str,
        role: str = "user",
        created_by: str | None = None,
    ) -> User:
        """Create an account on behalf of ``created_by``.

        ``created_by`` may be omitted only while no admin exists, i.e. for
        the very first admin; ``setup_admin`` is the route-facing way to do that.
        """
        username = _check_username(username)
        _check_password(password)
        if role not in USER_ROLES:
            raise ValidationError(f"Rol inválido. Valores permitidos: {', '.join(USER_ROLES)}")

        with unit_of_work(self.session, "create user", conflict_message=USERNAME_TAKEN):
            if created_by is None and self.setup_complete():
                raise ValidationError(ALREADY_CONFIGURED)
            user = self._add_user(username, password, role, created_by)

        logger.info("User %s (%s) created by %s", user.username, user.role, created_by or "setup")
        return user

    def setup_admin(self, username: str, password: str) -> User:
        """Create the first admin. Allowed exactly once."""
        if self.setup_complete():
            raise ValidationError(ALREADY_CONFIGURED)

        username = _check_username(username)
        _check_password(password)

        # The settings row's primary key makes a concurrent second setup fail.
        with unit_of_work(self.session, "set up first admin", conflict_message=ALREADY_CONFIGURED):
            if self.setup_complete():
                raise ValidationError(ALREADY_CONFIGURED)
            self.session.add(Setting(key=SETUP_SETTING_KEY, value=utc_now().isoformat()))
            user = self._add_user(username, password, "admin", None)

        logger.info("Initial admin %s created", user.username)
        return user

    def get_user(self, user_id: str) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("Usuario no encontrado")
        return user

    def list_users(self) -> list[User]:
        with unit_of_work(self.session, "list users"):
            stmt = select(User).order_by(User.created_at.desc(), User.username)
            return list(self.session.execute(stmt).scalars())

    def update_password(self, user_id: str, new_password: str) -> None:
        _check_password(new_password)
        with unit_of_work(self.session, "update password"):
            user = self.get_user(user_id)
            user.password_hash = hash_password(new_password)
        logger.info("Password updated for user %s", user_id)

    def delete_user(self, user_id: str, caller_id: str) -> None:
        if user_id == caller_id:
            raise ValidationError("No puedes eliminarte a ti mismo")

        with unit_of_work(
            self.session,
            "delete user",
            conflict_message="No se puede eliminar: el usuario tiene registros asociados.",
        ):
            stmt = select(User).where(User.id == user_id).with_for_update()
            user = self.session.execute(stmt).scalar_one_or_none()
            if user is None:
                raise NotFoundError("Usuario no encontrado")
            self.guard.ensure_can_delete("user", user.id)
            self.session.delete(user)

        logger.info("User %s deleted by %s", user_id, caller_id)
