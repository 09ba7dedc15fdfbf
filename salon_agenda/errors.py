"""Error taxonomy shared by the stores and the HTTP layer.

Every store operation fails with one of the ``SalonError`` subclasses
below. The request boundary renders them uniformly as
``{"error": <message>}`` with the matching status code.
"""
from __future__ import annotations

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


class SalonError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"error": self.message}


class ValidationError(SalonError):
    """Malformed or missing input."""

    status_code = 400


class UnauthenticatedError(SalonError):
    """Missing, invalid or expired credential."""

    status_code = 401


class ForbiddenError(SalonError):
    """Authenticated, but not allowed to perform the action."""

    status_code = 403


class NotFoundError(SalonError):
    status_code = 404


class ConflictError(SalonError):
    """Duplicate unique field, or a delete blocked by dependent records."""

    status_code = 400

    def __init__(self, message: str, dependent_count: int = 0) -> None:
        super().__init__(message)
        self.dependent_count = dependent_count


class InternalError(SalonError):
    status_code = 500

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(message)


def register_error_handlers(app: Flask) -> None:
    """Render every failure as the JSON error envelope."""

    @app.errorhandler(SalonError)
    def handle_salon_error(exc: SalonError):
        if exc.status_code >= 500:
            app.logger.error("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        app.logger.exception("Unhandled database error", exc_info=exc)
        return jsonify({"error": INTERNAL_ERROR_MESSAGE}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        app.logger.exception("Unhandled error", exc_info=exc)
        return jsonify({"error": INTERNAL_ERROR_MESSAGE}), 500
