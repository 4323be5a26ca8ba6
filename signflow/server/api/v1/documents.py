"""
Document Endpoints.

Documents owned by the API caller (or the caller's team when the token belongs
to a team), together with their recipients and fields.
"""

from typing import List, Union

from fastapi import APIRouter, Query

from signflow.core.database.entities import Recipient
from signflow.core.models.io import (
    DocumentCreate,
    DocumentDetailRead,
    DocumentListResponse,
    DocumentRead,
    FieldCreate,
    FieldRead,
    FieldUpdate,
    RecipientCreate,
    RecipientRead,
    RecipientUpdate,
)
from signflow.server.services.deps import ApiCallerDep, MailerDep, RequestMetadataDep, SessionDep
from signflow.services import documents as document_service
from signflow.services import fields as field_service
from signflow.services import recipients as recipient_service
from signflow.services.common import build_signing_url

router = APIRouter()


def recipient_read(recipient: Recipient) -> RecipientRead:
    """Recipient payload including the public URL they sign at."""
    data = RecipientRead.model_validate(recipient)
    data.signing_url = build_signing_url(recipient.token)
    return data


@router.get(
    "",
    response_model=DocumentListResponse,
    summary="List Documents",
    description="Paginated list of the caller's visible documents, newest first.",
)
async def list_documents(
    caller: ApiCallerDep,
    session: SessionDep,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, le=100, alias="perPage"),
) -> DocumentListResponse:
    result = await document_service.find_documents_for_owner(
        session, caller.user_id, caller.team_id, page=page, per_page=per_page
    )
    return DocumentListResponse(documents=result.data, total_pages=result.total_pages)


@router.post(
    "",
    response_model=DocumentRead,
    summary="Create Document",
    description="Upload a base64 PDF as a new DRAFT document, optionally with recipients and meta.",
)
async def create_document(
    body: DocumentCreate, caller: ApiCallerDep, session: SessionDep, metadata: RequestMetadataDep
) -> DocumentRead:
    document = await document_service.create_document(
        session,
        caller.user_id,
        caller.team_id if caller.team_id is not None else body.team_id,
        body.title,
        body.document_data,
        form_key=body.form_key,
        resident_id=body.resident_id,
        document_details=body.document_details,
        meta=body.meta,
        external_id=body.external_id,
        recipients=body.recipients,
        request_metadata=metadata,
    )
    return DocumentRead.model_validate(document)


@router.get(
    "/{document_id}",
    response_model=DocumentDetailRead,
    summary="Get Document",
    responses={404: {"description": "Document not found"}},
)
async def get_document(document_id: int, caller: ApiCallerDep, session: SessionDep) -> DocumentDetailRead:
    """
    Get a document with its recipients and fields.

    Each recipient carries the ``signingUrl`` they can sign at.
    """
    details = await document_service.get_document_with_details_by_id(
        session, document_id, caller.user_id, caller.team_id
    )
    data = DocumentDetailRead.model_validate(details.document)
    data.recipients = [recipient_read(r) for r in details.recipients]
    data.fields = [FieldRead.from_entity(f) for f in details.fields]
    return data


@router.delete(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Delete Document",
    description="Soft-delete a document. Recipients who already received it are notified.",
)
async def delete_document(
    document_id: int,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
    mailer: MailerDep,
) -> DocumentRead:
    document = await document_service.delete_document(
        session, document_id, caller.user_id, caller.team_id, request_metadata=metadata, mailer=mailer
    )
    return DocumentRead.model_validate(document)


# ---------------------------------------------------------------------------
# Recipients
# ---------------------------------------------------------------------------


@router.get("/{document_id}/recipients", response_model=List[RecipientRead], summary="List Recipients")
async def list_recipients(document_id: int, caller: ApiCallerDep, session: SessionDep) -> List[RecipientRead]:
    recipients = await recipient_service.get_recipients_for_document(
        session, document_id, caller.user_id, caller.team_id
    )
    return [recipient_read(r) for r in recipients]


@router.post("/{document_id}/recipients", response_model=RecipientRead, summary="Add Recipient")
async def create_recipient(
    document_id: int,
    body: RecipientCreate,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> RecipientRead:
    recipient = await recipient_service.create_recipient(
        session, document_id, caller.user_id, caller.team_id, body, request_metadata=metadata
    )
    return recipient_read(recipient)


@router.patch("/{document_id}/recipients/{recipient_id}", response_model=RecipientRead, summary="Update Recipient")
async def update_recipient(
    document_id: int,
    recipient_id: int,
    body: RecipientUpdate,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> RecipientRead:
    recipient = await recipient_service.update_recipient(
        session, document_id, recipient_id, caller.user_id, caller.team_id, body, request_metadata=metadata
    )
    return recipient_read(recipient)


@router.delete("/{document_id}/recipients/{recipient_id}", response_model=RecipientRead, summary="Remove Recipient")
async def delete_recipient(
    document_id: int,
    recipient_id: int,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> RecipientRead:
    recipient = await recipient_service.delete_recipient(
        session, document_id, recipient_id, caller.user_id, caller.team_id, request_metadata=metadata
    )
    return RecipientRead.model_validate(recipient)


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


@router.get("/{document_id}/fields", response_model=List[FieldRead], summary="List Fields")
async def list_fields(document_id: int, caller: ApiCallerDep, session: SessionDep) -> List[FieldRead]:
    fields = await field_service.get_fields_for_document(session, document_id, caller.user_id, caller.team_id)
    return [FieldRead.from_entity(f) for f in fields]


@router.post(
    "/{document_id}/fields",
    response_model=List[FieldRead],
    summary="Add Fields",
    description="Place one field or a list of fields. Nothing is stored unless every field is valid.",
)
async def create_fields(
    document_id: int,
    body: Union[List[FieldCreate], FieldCreate],
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> List[FieldRead]:
    items = body if isinstance(body, list) else [body]
    fields = await field_service.create_fields(
        session, document_id, caller.user_id, caller.team_id, items, request_metadata=metadata
    )
    return [FieldRead.from_entity(f) for f in fields]


@router.patch("/{document_id}/fields/{field_id}", response_model=FieldRead, summary="Update Field")
async def update_field(
    document_id: int,
    field_id: int,
    body: FieldUpdate,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> FieldRead:
    field = await field_service.update_field(
        session, document_id, field_id, caller.user_id, caller.team_id, body, request_metadata=metadata
    )
    return FieldRead.from_entity(field)


@router.delete("/{document_id}/fields/{field_id}", response_model=FieldRead, summary="Remove Field")
async def delete_field(
    document_id: int,
    field_id: int,
    caller: ApiCallerDep,
    session: SessionDep,
    metadata: RequestMetadataDep,
) -> FieldRead:
    field = await field_service.delete_field(
        session, document_id, field_id, caller.user_id, caller.team_id, request_metadata=metadata
    )
    return FieldRead.from_entity(field)
