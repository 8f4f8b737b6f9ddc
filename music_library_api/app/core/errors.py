"""
Error taxonomy shared by the store, the service layer and the API.

Every failure raised by the application is an ``AppError`` carrying
one ``ErrorKind``, a human readable ``message`` and an optional
underlying ``cause``.  The HTTP layer turns the kind into a status
code via ``http_status_for``; nothing below the API layer knows about
HTTP.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from fastapi import status


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL = "INTERNAL"
    VALIDATION = "VALIDATION"
    ALREADY_EXISTS = "ALREADY_EXISTS"


class AppError(Exception):
    """Base class for domain errors.

    Parameters
    ----------
    message : str
        Text returned to the client (except for internal errors).
    cause : Optional[BaseException]
        Lower level exception that triggered this error, if any.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND


class LyricsNotFound(NotFound):
    """The song exists but has no lyrics text stored."""


class BadRequest(AppError):
    kind = ErrorKind.BAD_REQUEST


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION


class AlreadyExists(AppError):
    kind = ErrorKind.ALREADY_EXISTS


class InternalError(AppError):
    kind = ErrorKind.INTERNAL


_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: 422,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code used to report errors of ``kind``."""
    return _STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
