"""
Admin Console Endpoints.

Restricted to users holding the global ADMIN role.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Query

from signflow.analytics import get_signer_conversion, get_signing_volume
from signflow.core.models.io import (
    AdminDocumentRead,
    DocumentRead,
    FindResult,
    SignerConversionRow,
    SigningVolumeResponse,
)
from signflow.server.services.deps import AdminCallerDep, MailerDep, RequestMetadataDep, SessionDep
from signflow.services import documents as document_service

router = APIRouter()


@router.get(
    "/documents",
    response_model=FindResult[AdminDocumentRead],
    summary="Find Documents",
    description="Every visible document, newest first, optionally filtered by title.",
)
async def find_documents(
    admin: AdminCallerDep,
    session: SessionDep,
    query: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, le=100, alias="perPage"),
) -> FindResult[AdminDocumentRead]:
    return await document_service.find_documents(session, query=query, page=page, per_page=per_page)


@router.delete(
    "/documents/{document_id}",
    response_model=DocumentRead,
    summary="Hard Delete Document",
    description="Remove a document and everything attached to it. Pending recipients are told it was cancelled.",
)
async def super_delete_document(
    document_id: int,
    admin: AdminCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
    mailer: MailerDep,
) -> DocumentRead:
    document = await document_service.super_delete_document(
        session, document_id, request_metadata=metadata, mailer=mailer
    )
    return DocumentRead.model_validate(document)


@router.get("/signing-volume", response_model=SigningVolumeResponse, summary="Signing Volume Leaderboard")
async def signing_volume(
    admin: AdminCallerDep,
    session: SessionDep,
    search: str = "",
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, le=100, alias="perPage"),
    sort_by: Literal["name", "created_at", "signing_volume"] = Query(default="signing_volume", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
) -> SigningVolumeResponse:
    return await get_signing_volume(
        session, search=search, page=page, per_page=per_page, sort_by=sort_by, sort_order=sort_order
    )


@router.get(
    "/signer-conversion",
    response_model=List[SignerConversionRow],
    response_model_by_alias=False,
    summary="Signer Conversion",
    description="Signers who created an account after signing, per sign-up month, newest first.",
)
async def signer_conversion(admin: AdminCallerDep, session: SessionDep) -> List[SignerConversionRow]:
    return [SignerConversionRow(**row) for row in await get_signer_conversion(session)]
