"""
Middleware modules for the SignFlow server.

This package contains custom middleware for request/response logging.
"""

from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
