"""
SignFlow Server Package.

This package contains the web server for SignFlow.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    middleware: Request logging middleware.
    exception_handlers: Application-wide exception handlers.
"""
