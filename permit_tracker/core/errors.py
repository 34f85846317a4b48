"""
Domain errors.

Every failure path of the use cases raises one of these. The API layer maps
them onto HTTP responses (see `permit_tracker.api.errors`).
"""


class PermitTrackerError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PermitTrackerError):
    """Input is missing required fields or has the wrong shape."""

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundError(PermitTrackerError):
    """A referenced package, document, setting or user does not exist."""

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class IllegalTransitionError(PermitTrackerError):
    """A requested status change is rejected by the status machine."""

    def __init__(self, current: str, target: str, reason: str):
        super().__init__(f"Cannot move package from {current} to {target}: {reason}")
        self.current = current
        self.target = target
        self.reason = reason


class ConflictError(PermitTrackerError):
    """The request clashes with existing data (e.g. an email already registered)."""


class RepositoryError(PermitTrackerError):
    """The persistence layer failed. Not retried."""


class StorageError(PermitTrackerError):
    """The file storage failed to write or read a file."""


class PermissionDeniedError(PermitTrackerError):
    """The current user lacks the role required by the operation."""
