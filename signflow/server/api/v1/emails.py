"""
E-mail Delivery Endpoint.

Sends one HTML e-mail through Notify. Only POST is accepted.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from signflow.core.logging_config import get_logger
from signflow.integrations.notify import EmailRecipient
from signflow.server.services.deps import NotifyDep

logger = get_logger(__name__)

router = APIRouter()


@router.api_route(
    "/send",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    summary="Send E-mail",
    responses={
        400: {"description": "Missing parameters"},
        405: {"description": "Method not allowed"},
        500: {"description": "Delivery failed"},
    },
)
async def send_email(request: Request, notify: NotifyDep) -> JSONResponse:
    """
    Send an e-mail.

    The JSON body must carry ``to``, ``subject`` and ``body`` (HTML).
    """
    if request.method != "POST":
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})

    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        payload = {}

    to, subject, body = payload.get("to"), payload.get("subject"), payload.get("body")
    if not to or not subject or not body:
        return JSONResponse(status_code=400, content={"error": "Missing parameters in the request"})
    if not isinstance(to, str) or not isinstance(subject, str) or not isinstance(body, str):
        return JSONResponse(status_code=400, content={"error": "Parameters must be strings"})

    result = await notify.send_email(EmailRecipient(email=to), subject, body)
    if not result.success:
        return JSONResponse(status_code=500, content={"error": result.message})

    logger.info(f"E-mail sent to {to}")
    return JSONResponse(status_code=200, content={"message": "Email sent successfully"})
