"""
Exception hierarchy for the mess voting service.

Every error carries a message, a stable error code and the HTTP status the
API layer answers with.
"""
from typing import Any, Dict, Optional


class MessVoteError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# ---- Validation ----

class ValidationError(MessVoteError):
    """Malformed input; the operation was aborted before any write."""
    status_code = 400


class InvalidChoice(ValidationError):
    """The chosen item is not votable for that day and meal."""


# ---- Identity ----

class NotAuthenticated(MessVoteError):
    status_code = 401

    def __init__(self, message: str = "Please log in to vote", **kwargs):
        super().__init__(message, **kwargs)


class NotFound(MessVoteError):
    status_code = 404


# ---- State ----

class StateError(MessVoteError):
    """Rejected because of the current state; retrying will not help."""
    status_code = 409


class VotingClosed(StateError):
    def __init__(self, message: str = "Voting is currently closed", **kwargs):
        super().__init__(message, **kwargs)


class DuplicateRegistration(StateError):
    def __init__(self, message: str = "Student ID already exists", **kwargs):
        super().__init__(message, **kwargs)


class DuplicatePlanItem(StateError):
    def __init__(self, message: str = "Item already added to this meal", **kwargs):
        super().__init__(message, **kwargs)


# ---- Infrastructure ----

class TransientStoreError(MessVoteError):
    """Store I/O failure or lock timeout."""
    status_code = 503


class NonFatalCleanupError(MessVoteError):
    """Orphaned blob could not be removed. Logged, never surfaced."""
