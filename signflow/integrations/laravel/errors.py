"""Error types specific to the Laravel backend integration.

Usage:
- Catch ``LaravelApiError`` for any failed call and inspect ``status_code`` or
  ``details``.
- ``LaravelAuthError`` narrows it to login and bearer-token problems.
- ``LaravelConfigurationError`` means the integration cannot run at all
  (missing URL or unusable encryption key).
"""

from __future__ import annotations

from typing import Any, Optional


class LaravelApiError(Exception):
    """Base error for Laravel API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the server (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class LaravelAuthError(LaravelApiError):
    """Login failed, returned no token, or no token was supplied."""


class LaravelConfigurationError(LaravelApiError):
    """Required Laravel settings are missing or invalid."""
