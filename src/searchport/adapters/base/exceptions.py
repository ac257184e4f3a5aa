"""Adapter-specific exceptions.

These never reach callers of the document operations, which always resolve
to a result model. They travel between the HTTP call layer and the
operations, and are raised outright only for misconfiguration.
"""

from __future__ import annotations

from typing import Any


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConfigurationError(AdapterError):
    """Raised when adapter configuration is invalid."""


class TransportError(AdapterError):
    """Raised when the backend cannot be reached at all."""


class BackendResponseError(AdapterError):
    """Raised when a backend response fails the operation's success predicate.

    Args:
        status: HTTP status of the response.
        body: Parsed JSON body, or the raw text when it is not JSON.
    """

    def __init__(self, status: int, body: Any) -> None:
        super().__init__(f"Backend responded with HTTP {status}")
        self.status = status
        self.body = body
