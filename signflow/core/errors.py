"""Application error types.

``AppError`` is raised by the service layer whenever a lookup misses, an
authorization predicate fails, or a request body is rejected. The server maps it
to an HTTP response through ``AppError.status``; services never build HTTP
responses themselves.

Integration clients raise their own errors (see ``signflow.integrations``),
which carry the upstream ``status_code`` and ``details`` for diagnosis.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class AppErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BODY = "INVALID_BODY"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_STATUS_BY_CODE: dict[AppErrorCode, int] = {
    AppErrorCode.NOT_FOUND: 404,
    AppErrorCode.UNAUTHORIZED: 401,
    AppErrorCode.INVALID_REQUEST: 400,
    AppErrorCode.INVALID_BODY: 400,
    AppErrorCode.ALREADY_EXISTS: 409,
    AppErrorCode.LIMIT_EXCEEDED: 429,
    AppErrorCode.UNKNOWN_ERROR: 500,
}


class AppError(Exception):
    """Typed application error.

    Args:
        code: Error category.
        message: Human-readable description; defaults to the code value.
        status_code: Explicit HTTP status, overriding the code's default mapping.
    """

    def __init__(
        self,
        code: AppErrorCode,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message or code.value)
        self.code = code
        self.message = message or code.value
        self._status_code = status_code

    @property
    def status(self) -> int:
        if self._status_code is not None:
            return self._status_code
        return _STATUS_BY_CODE.get(self.code, 500)

    def to_rest_api_error(self) -> tuple[int, dict[str, Any]]:
        return self.status, {"message": self.message}

    def __repr__(self) -> str:
        return f"AppError(code={self.code.value}, message={self.message!r})"
