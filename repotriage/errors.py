"""
Triage Error Taxonomy

Exceptions raised by the gateway, the archive inspector and the URL parser.
The orchestrator turns them into a TriageFailure outcome; nothing below it
converts them into verdicts.
"""

from typing import Any, Optional


class TriageError(Exception):
    """Base exception for triage failures."""


class InvalidTargetError(TriageError):
    """Raised when the input URL cannot be parsed into an account."""


class UnsupportedHostError(TriageError):
    """Raised when the input URL does not point at a supported platform."""

    def __init__(self, host: str = ""):
        super().__init__("unsupported host, only GitHub is supported for now")
        self.host = host


class AccountNotFoundError(TriageError):
    """Raised when the platform reports the account does not exist (404)."""

    def __init__(self, username: str = ""):
        super().__init__("username not found")
        self.username = username


class UpstreamError(TriageError):
    """
    Raised for any unexpected non-success response from the platform API
    or from an object download.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status = status
        self.body = body


class InspectionError(UpstreamError):
    """Raised when an archive payload is malformed or not a supported container."""
