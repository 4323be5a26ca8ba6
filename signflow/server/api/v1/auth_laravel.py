"""
Laravel SSO Endpoint.

Exchanges the configured service credentials for a Laravel access token.
Only POST is accepted.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from signflow.core.logging_config import get_logger
from signflow.integrations.laravel import LaravelApiError
from signflow.server.services.deps import LaravelDep

logger = get_logger(__name__)

router = APIRouter()


@router.api_route(
    "/laravel",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    summary="Authenticate with Laravel",
    responses={405: {"description": "Method not allowed"}, 500: {"description": "Authentication failed"}},
)
async def authenticate_with_laravel(request: Request, laravel: LaravelDep) -> JSONResponse:
    if request.method != "POST":
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})

    try:
        token = await laravel.authenticate()
    except LaravelApiError as e:
        logger.error(f"Laravel auth API error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Authentication failed"})

    return JSONResponse(status_code=200, content={"access_token": token})
