"""Domain errors raised by the identity and availability services.

Routes never translate these by hand: ``app.main`` registers a single handler
that maps each class to its HTTP status via ``status_code``.
"""

from __future__ import annotations

from fastapi import status


class SchedulingError(Exception):
    """Base class for errors the API maps to a response."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(SchedulingError):
    """Caller is not a member of the team it addressed.

    Raised instead of NotFound so non-members cannot probe which teams exist.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class UnknownSlot(SchedulingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unknown time slot"


class NotFound(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ValidationError(SchedulingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class ConflictError(SchedulingError):
    """A uniqueness constraint rejected an insert."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting record already exists"


class IdentityCorruptionError(SchedulingError):
    """The identity store contradicts its own uniqueness guarantees."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Identity store is inconsistent"


class ProviderError(SchedulingError):
    """The OAuth provider refused or failed a request."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Authentication provider error"
