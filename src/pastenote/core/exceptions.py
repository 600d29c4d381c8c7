"""Exceptions raised by the note core.

The repository and services raise these; only the HTTP layer turns them
into responses (see ``main.note_error_handler``).
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Machine-readable error identifiers."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    SERVICE_UNAVAILABLE = "service_unavailable"


class NoteError(Exception):
    """Base exception for note operations.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status the presentation layer should answer with
        details: Additional context about the error
    """

    code: ErrorCode = ErrorCode.BAD_REQUEST
    status_code: int = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"error": self.code.value, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class NoteNotFoundError(NoteError):
    """No such note, or the note was deleted."""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, note_id: str):
        super().__init__(f"note {note_id} not found", {"note_id": note_id})
        self.note_id = note_id


class NoteUnauthorizedError(NoteError):
    """Password does not match the one stored with the note."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, note_id: str):
        super().__init__("password is wrong", {"note_id": note_id})
        self.note_id = note_id


class NoteBadRequestError(NoteError):
    """Note text or requested ID is not acceptable."""

    code = ErrorCode.BAD_REQUEST
    status_code = 400


class NoteConflictError(NoteError):
    """Requested note ID is already taken."""

    code = ErrorCode.CONFLICT
    status_code = 409

    def __init__(self, note_id: str):
        super().__init__(f"note id {note_id} is not available", {"note_id": note_id})
        self.note_id = note_id


class ServiceUnavailableError(NoteError):
    """The backing store failed (connectivity, transaction, ...)."""

    code = ErrorCode.SERVICE_UNAVAILABLE
    status_code = 503
