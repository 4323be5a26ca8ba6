"""
Health Check Endpoints.

``/health`` reports whether the server can reach its database; load balancers
take a 503 as a signal to stop routing traffic. ``/version`` reports the API
release.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from signflow.core.logging_config import get_logger
from signflow.server.core import constant
from signflow.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Report server status and database reachability.",
    responses={503: {"description": "Database unreachable"}},
)
async def health_check(session: SessionDep):
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {e}")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "unavailable"})
    return {"status": "ok", "database": "ok"}


@router.get("/version", summary="Get Version")
async def version():
    return {"version": constant.VERSION, "schema_version": "v1"}
