"""
Exception hierarchy shared by the API and the recorder client.
"""
from typing import Any, Optional


class DialTesterError(Exception):
    """Base exception for all dial tester errors."""

    http_status: int = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(DialTesterError):
    """Malformed or out-of-range input rejected at a boundary."""

    http_status = 400


class StoreError(DialTesterError):
    """Backend unavailable or query failure."""

    http_status = 500


class NotFoundError(StoreError):
    """Referenced row is missing.

    Surfaced to HTTP callers as a store failure (500), not a 404.
    """


class InvalidStateError(DialTesterError):
    """Recorder state machine received a transition it cannot make."""

    http_status = 409
