"""Error types for the resident-information service client."""

from __future__ import annotations

from typing import Any, Optional


class ResidentServiceError(Exception):
    """A resident-service call failed or could not be attempted.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the last attempt, when there was a response.
        details: Response body of the last attempt, when available.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details
