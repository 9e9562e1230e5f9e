"""
Centralized error handling for jobs and API routes.
Exception types for the storage and email collaborators, plus a reusable helper so routes stay thin.
"""
from __future__ import annotations

from typing import Callable

from fastapi import HTTPException


class ComplianceError(Exception):
    """Base class for errors raised by the compliance backend."""


class StorageError(ComplianceError):
    """The storage collaborator rejected an operation (connectivity, constraint, bad SQL)."""


class ReminderDeliveryError(ComplianceError):
    """The email channel reported that a reminder was not delivered."""


# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_SERVICE_UNAVAILABLE = 503  # database down, locked, unreachable
STATUS_INTERNAL_ERROR = 500

MSG_STORAGE_UNAVAILABLE = "Storage unavailable. Try again shortly."


# ---------------------------------------------------------------------------
# Error rules: (predicate, status_code, detail_message)
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

def _is_storage_error(exc: Exception) -> bool:
    return isinstance(exc, StorageError)


# List of (predicate, status_code, detail). First match wins.
API_ERROR_RULES: list[tuple[Callable[[Exception], bool], int, str]] = [
    (_is_storage_error, STATUS_SERVICE_UNAVAILABLE, MSG_STORAGE_UNAVAILABLE),
]


def error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception raised by a service call into an HTTPException.
    Uses API_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for predicate, status_code, detail in API_ERROR_RULES:
        if predicate(exc):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
