from __future__ import annotations

from typing import Dict, Optional

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException


class PracticeError(Exception):
    """Base class for errors raised by the practice store and helpers."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> Dict[str, object]:
        return {"message": self.message}


class NotFoundError(PracticeError):
    status_code = 404
    message = "Not found"


class ClientNotFoundError(NotFoundError):
    message = "Client not found"


class TaskNotFoundError(NotFoundError):
    message = "Task not found"


class UserNotFoundError(NotFoundError):
    message = "User not found"


class ValidationError(PracticeError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> Dict[str, object]:
        return {"message": self.message, "errors": self.errors}


class UnknownClientError(PracticeError):
    """A task referenced a client id that does not exist."""

    status_code = 400
    message = "Unknown client"


class ConflictError(PracticeError):
    status_code = 409
    message = "Conflict"


class CredentialDecryptionError(PracticeError):
    message = "Stored credential could not be decrypted"


# ---------- Handlers ----------

def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PracticeError)
    def handle_practice_error(exc: PracticeError):
        if exc.status_code >= 500:
            current_app.logger.error("%s: %s", type(exc).__name__, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        current_app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"message": "Internal server error"}), 500
