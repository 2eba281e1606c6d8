from __future__ import annotations

from datetime import datetime
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` and ``http_status`` are the stable wire representation used by the
    JSON API and understood by the HTTP clients.
    """

    code = "DOMAIN_ERROR"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class MalformedScheduleError(ValidationError):
    """Raised when a schedule carries an unparseable expected_start/expected_end."""

    code = "MALFORMED_SCHEDULE"


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    http_status = 404


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    http_status = 403


class WindowClosedError(DomainError):
    """Check-in attempted before the window opens."""

    code = "WINDOW_CLOSED"
    http_status = 409

    def __init__(self, message: str, *, opens_at: Optional[datetime] = None, remaining_seconds: Optional[int] = None):
        super().__init__(message)
        self.opens_at = opens_at
        self.remaining_seconds = remaining_seconds


class InvalidTransitionError(DomainError):
    """Action not allowed from the current attendance state."""

    code = "INVALID_TRANSITION"
    http_status = 409

    def __init__(self, message: str, *, state=None):
        super().__init__(message)
        self.state = state


class IdentityRejectedError(DomainError):
    """The identity verifier declined the actor."""

    code = "IDENTITY_REJECTED"
    http_status = 401


class StationInvalidError(DomainError):
    """The terminal credential is missing, unknown or expired.

    Not retryable: the station has to be registered again.
    """

    code = "STATION_INVALID"
    http_status = 403


class ActionInProgressError(DomainError):
    code = "ACTION_IN_PROGRESS"
    http_status = 409


class CollaboratorError(DomainError):
    """Unexpected failure talking to an external collaborator."""

    code = "COLLABORATOR_ERROR"
    http_status = 502

    def __init__(self, message: str, *, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


_BY_CODE = {
    cls.code: cls
    for cls in (
        ValidationError,
        MalformedScheduleError,
        NotFoundError,
        AuthorizationError,
        WindowClosedError,
        InvalidTransitionError,
        IdentityRejectedError,
        StationInvalidError,
        ActionInProgressError,
    )
}


def error_class_for_code(code: Optional[str]) -> Optional[type[DomainError]]:
    if not code:
        return None
    return _BY_CODE.get(str(code).upper())
