"""Authorization policy.

Pure decisions over (caller, target). Reading is open to every
authenticated identity; only mutation is gated.

- admins may modify anything;
- regular users may modify only what they created;
- user management is reserved to admins.
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import ForbiddenError
from .security import Identity

_VERBS = {"update": "editar", "delete": "eliminar"}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None


ALLOW = Decision(True)


def can_modify(caller: Identity, entity, action: str) -> Decision:
    """Decide whether ``caller`` may ``action`` ("update" or "delete") ``entity``."""
    if caller.is_admin:
        return ALLOW
    if entity.created_by == caller.id:
        return ALLOW

    verb = _VERBS.get(action, "modificar")
    return Decision(False, f"No puedes {verb} {entity.label} de otros usuarios")


ADMIN_REQUIRED = "Acceso denegado. Se requiere rol de administrador."


def can_manage_users(caller: Identity, reason: str = ADMIN_REQUIRED) -> Decision:
    if caller.is_admin:
        return ALLOW
    return Decision(False, reason)


def enforce(decision: Decision) -> None:
    if not decision.allowed:
        raise ForbiddenError(decision.reason or "Acceso denegado")
