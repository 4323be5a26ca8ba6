"""
Field placement on documents.

Validation rules:
- page numbers start at 1
- the field's recipient must belong to the document and must not have signed
- NUMBER, RADIO, CHECKBOX, DROPDOWN and TEXT fields need ``field_meta`` whose
  ``type`` names the same field type (case-insensitive)
- FREE_SIGNATURE fields cannot be placed through the API
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import Document, Field, Recipient
from signflow.core.database.repositories import FieldRepository, UserRepository
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import ADVANCED_FIELD_TYPES, AuditLogType, FieldType, SigningStatus
from signflow.core.models.io import FieldCreate, FieldUpdate

from .documents import get_document_by_id
from .logs import RequestMetadata, create_document_audit_log
from .recipients import ensure_document_editable, get_document_recipient

logger = logging.getLogger(__name__)


def validate_field_input(field_type: FieldType, page_number: int, field_meta: Optional[Dict[str, Any]]) -> None:
    if page_number <= 0:
        raise AppError(AppErrorCode.INVALID_BODY, "Invalid page number")
    if field_type == FieldType.FREE_SIGNATURE:
        raise AppError(AppErrorCode.INVALID_BODY, "Free signature fields are not supported")
    if field_type in ADVANCED_FIELD_TYPES:
        if not field_meta:
            raise AppError(AppErrorCode.INVALID_BODY, f"Field meta is required for {field_type.value} fields")
        meta_type = str(field_meta.get("type") or "")
        if meta_type.lower() != field_type.value.lower():
            raise AppError(AppErrorCode.INVALID_BODY, "Field meta type does not match the field type")


async def _signable_recipient(session: AsyncSession, document: Document, recipient_id: int) -> Recipient:
    recipient = await get_document_recipient(session, document, recipient_id)
    if recipient.signing_status == SigningStatus.SIGNED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, "Recipient has already signed")
    return recipient


async def _document_field(session: AsyncSession, document: Document, field_id: int) -> Field:
    field = await FieldRepository(session).get_by_id(field_id)
    if field is None or field.document_id != document.id:
        raise AppError(AppErrorCode.NOT_FOUND, "Field not found")
    return field


def _audit_data(field: Field, recipient: Recipient) -> Dict[str, Any]:
    return {
        "fieldId": field.secondary_id,
        "fieldRecipientEmail": recipient.email,
        "fieldRecipientId": recipient.id,
        "fieldType": field.type,
    }


async def get_fields_for_document(
    session: AsyncSession, document_id: int, user_id: int, team_id: Optional[int] = None
) -> List[Field]:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    return await FieldRepository(session).list_for_document(document.id)


async def create_fields(
    session: AsyncSession,
    document_id: int,
    user_id: int,
    team_id: Optional[int],
    fields: List[FieldCreate],
    request_metadata: Optional[RequestMetadata] = None,
) -> List[Field]:
    """Place ``fields`` on the document; all of them are validated before any is stored."""
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)
    user = await UserRepository(session).get_by_id(user_id)

    recipients: Dict[int, Recipient] = {}
    for item in fields:
        validate_field_input(item.type, item.page_number, item.field_meta)
        if item.recipient_id not in recipients:
            recipients[item.recipient_id] = await _signable_recipient(session, document, item.recipient_id)

    created = []
    for item in fields:
        recipient = recipients[item.recipient_id]
        field = Field(
            document_id=document.id,
            recipient_id=recipient.id,
            type=item.type.value,
            page=item.page_number,
            position_x=item.page_x,
            position_y=item.page_y,
            width=item.page_width,
            height=item.page_height,
            field_meta=item.field_meta,
        )
        session.add(field)
        await session.flush()
        await create_document_audit_log(
            session,
            document.id,
            AuditLogType.FIELD_CREATED,
            data=_audit_data(field, recipient),
            user=user,
            request_metadata=request_metadata,
        )
        created.append(field)

    await session.commit()
    for field in created:
        await session.refresh(field)
    logger.debug(f"Created {len(created)} field(s) on document {document.id}")
    return created


async def update_field(
    session: AsyncSession,
    document_id: int,
    field_id: int,
    user_id: int,
    team_id: Optional[int],
    data: FieldUpdate,
    request_metadata: Optional[RequestMetadata] = None,
) -> Field:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)
    field = await _document_field(session, document, field_id)

    recipient_id = data.recipient_id if data.recipient_id is not None else field.recipient_id
    recipient = await _signable_recipient(session, document, recipient_id)

    field_type = data.type or FieldType(field.type)
    page_number = data.page_number if data.page_number is not None else field.page
    field_meta = data.field_meta if data.field_meta is not None else field.field_meta
    validate_field_input(field_type, page_number, field_meta)

    field.recipient_id = recipient.id
    field.type = field_type.value
    field.page = page_number
    field.field_meta = field_meta
    if data.page_x is not None:
        field.position_x = data.page_x
    if data.page_y is not None:
        field.position_y = data.page_y
    if data.page_width is not None:
        field.width = data.page_width
    if data.page_height is not None:
        field.height = data.page_height
    session.add(field)

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.FIELD_UPDATED,
        data=_audit_data(field, recipient),
        user=await UserRepository(session).get_by_id(user_id),
        request_metadata=request_metadata,
    )
    await session.commit()
    await session.refresh(field)
    return field


async def delete_field(
    session: AsyncSession,
    document_id: int,
    field_id: int,
    user_id: int,
    team_id: Optional[int] = None,
    request_metadata: Optional[RequestMetadata] = None,
) -> Field:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)
    field = await _document_field(session, document, field_id)
    recipient = await _signable_recipient(session, document, field.recipient_id)

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.FIELD_DELETED,
        data=_audit_data(field, recipient),
        user=await UserRepository(session).get_by_id(user_id),
        request_metadata=request_metadata,
    )
    await session.delete(field)
    await session.commit()
    return field
