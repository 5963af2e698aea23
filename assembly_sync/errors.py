from __future__ import annotations

from typing import Optional


class AssemblySuiteError(Exception):
    """Base exception for assembly suite synchronization errors."""


class ConfigurationError(AssemblySuiteError, ValueError):
    """Missing credentials, base URL or production line."""


class NotAuthenticatedError(AssemblySuiteError):
    """A remote call was attempted before authenticate() succeeded."""


class PayloadDecodeError(AssemblySuiteError, ValueError):
    """The remote service answered with JSON of an unexpected shape."""


class RemoteServiceError(AssemblySuiteError):
    """Non-2xx response from the assembly suite."""

    def __init__(self, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(f"HTTP error code: {status_code}, Error response: {body}")
        self.status_code = status_code
        self.body = body
