"""Error types for the Notify transport."""

from __future__ import annotations

from typing import Any, Optional


class NotifyConfigurationError(Exception):
    """Raised internally when the Notify endpoint or credentials are missing.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details
