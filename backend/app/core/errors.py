# app/core/errors.py
from typing import Optional


class IntakeError(Exception):
    """Base for failures raised while taking in a form submission."""

    status_code = 500

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        # server-side detail, only shown to callers in diagnostic mode
        self.detail = detail or message


class ValidationError(IntakeError):
    """A required field is missing; the caller can fix and resend."""

    status_code = 400


class PersistenceError(IntakeError):
    """The store was unreachable or rejected the statement."""


class NotificationError(IntakeError):
    """The SMTP transport failed to deliver a staff notification."""
