"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signflow.core.database import init_db
from signflow.core.logging_config import get_logger, setup_logging
from signflow.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    auth_laravel,
    documents,
    emails,
    growth,
    health,
    sign,
    teams,
    templates,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Verifies the database connection on startup. The schema itself is managed by
    Alembic.
    """
    try:
        logger.info("Starting up SignFlow Server...")
        await init_db()
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down SignFlow Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    SignFlow Server API

    Backend services for the SignFlow e-signature platform: documents, templates,
    recipients and fields, team management, signing, growth analytics and the
    Laravel and Notify integrations.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(documents.router, prefix=f"{constant.API_V1_STR}/documents", tags=["documents"])
app.include_router(templates.router, prefix=f"{constant.API_V1_STR}/templates", tags=["templates"])
app.include_router(teams.router, prefix=f"{constant.API_V1_STR}/team", tags=["teams"])
app.include_router(sign.router, prefix=f"{constant.API_V1_STR}/sign", tags=["sign"])
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", tags=["admin"])
app.include_router(growth.router, prefix=f"{constant.API_STR}/growth", tags=["growth"])
app.include_router(auth_laravel.router, prefix=f"{constant.API_STR}/auth", tags=["auth"])
app.include_router(emails.router, prefix=f"{constant.API_STR}/email", tags=["email"])
