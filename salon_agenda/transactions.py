"""Unit-of-work helper shared by the stores."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import ConflictError, InternalError, SalonError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(
    session: Session,
    action: str,
    conflict_message: str = "El registro entra en conflicto con datos existentes",
) -> Iterator[Session]:
    """Run one store operation and commit it, or roll everything back.

    Domain errors are re-raised untouched. A constraint the database
    refuses becomes ``ConflictError``; any other store failure becomes
    ``InternalError``.
    """
    try:
        yield session
        session.commit()
    except SalonError:
        session.rollback()
        raise
    except IntegrityError as exc:
        session.rollback()
        logger.warning("Integrity error while trying to %s: %s", action, exc.orig)
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise InternalError() from exc
