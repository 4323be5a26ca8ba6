"""
Signing Endpoints.

Authenticated by the recipient's signing token in the path rather than an API
token.
"""

from typing import Any, Dict

from fastapi import APIRouter

from signflow.core.models.io import DocumentCompleteRequest, DocumentRead, DocumentRejectRequest, ResidentInfoRead
from signflow.server.services.deps import (
    LaravelDep,
    MailerDep,
    RequestMetadataDep,
    ResidentServiceDep,
    SessionDep,
)
from signflow.services import documents as document_service

router = APIRouter()


@router.get(
    "/{token}/resident",
    response_model=ResidentInfoRead,
    summary="Get Resident ID",
    responses={400: {"description": "Missing token"}, 404: {"description": "Resident not found"}},
)
async def get_resident_info(token: str, session: SessionDep) -> ResidentInfoRead:
    info = await document_service.get_resident_info(session, token)
    return ResidentInfoRead(resident_id=info["resident_id"])


@router.get(
    "/{token}/resident/details",
    summary="Get Resident Details",
    description="Resident record from the resident service for the document behind the token.",
)
async def get_resident_details(
    token: str, session: SessionDep, resident_service: ResidentServiceDep
) -> Dict[str, Any]:
    info = await document_service.get_resident_info(session, token)
    return await resident_service.get_resident(info["resident_id"])


@router.post(
    "/{token}/complete",
    response_model=DocumentRead,
    summary="Complete Document",
    description="Mark the recipient as signed and advance or complete the document.",
)
async def complete_document(
    token: str,
    body: DocumentCompleteRequest,
    session: SessionDep,
    metadata: RequestMetadataDep,
    mailer: MailerDep,
    laravel: LaravelDep,
) -> DocumentRead:
    document = await document_service.complete_document_with_token(
        session,
        token,
        body.document_id,
        request_metadata=metadata,
        mailer=mailer,
        laravel=laravel,
        file_url=str(body.file_url) if body.file_url is not None else None,
    )
    return DocumentRead.model_validate(document)


@router.post(
    "/{token}/reject",
    response_model=DocumentRead,
    summary="Reject Document",
    description="Mark the recipient as having rejected the document and notify the owner.",
)
async def reject_document(
    token: str,
    body: DocumentRejectRequest,
    session: SessionDep,
    metadata: RequestMetadataDep,
    mailer: MailerDep,
) -> DocumentRead:
    document = await document_service.reject_document_with_token(
        session,
        token,
        body.document_id,
        body.reason,
        request_metadata=metadata,
        mailer=mailer,
    )
    return DocumentRead.model_validate(document)
