"""Error taxonomy surfaced by the repository layer."""
from typing import Any, Optional


class DashboardError(Exception):
    """Base class for every error raised by the data-access layer."""


class ValidationError(DashboardError):
    """Payload violates a required field, enumeration or range constraint."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class AuthorizationError(DashboardError):
    """Acting user is not a member (or lacks the role) for the target organization."""


class NotFoundError(DashboardError):
    """Referenced id or foreign key does not exist."""


class ConflictError(DashboardError):
    """Unique-pair violation or a change that would leave the tenant inconsistent."""


class TransportError(DashboardError):
    """Backing store or network failure."""
