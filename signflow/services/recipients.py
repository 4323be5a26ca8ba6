"""
Recipient operations on documents owned by the caller.

Every mutation refuses COMPLETED documents and recipients that have already
signed, and writes a document audit entry.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import Document, Recipient, User
from signflow.core.database.repositories import FieldRepository, RecipientRepository, UserRepository
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import AuditLogType, DocumentStatus, SigningStatus
from signflow.core.models.io import RecipientCreate, RecipientUpdate
from signflow.core.security import generate_token

from .documents import get_document_by_id
from .logs import RequestMetadata, create_document_audit_log

logger = logging.getLogger(__name__)


def ensure_document_editable(document: Document) -> None:
    if document.status == DocumentStatus.COMPLETED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, "Document is already completed")


async def get_document_recipient(session: AsyncSession, document: Document, recipient_id: int) -> Recipient:
    recipient = await RecipientRepository(session).get_by_id(recipient_id)
    if recipient is None or recipient.document_id != document.id:
        raise AppError(AppErrorCode.NOT_FOUND, "Recipient not found")
    return recipient


def _audit_data(recipient: Recipient) -> dict:
    return {
        "recipientEmail": recipient.email,
        "recipientName": recipient.name,
        "recipientId": recipient.id,
        "recipientRole": recipient.role,
    }


async def _acting_user(session: AsyncSession, user_id: int) -> Optional[User]:
    return await UserRepository(session).get_by_id(user_id)


async def get_recipients_for_document(
    session: AsyncSession, document_id: int, user_id: int, team_id: Optional[int] = None
) -> List[Recipient]:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    return await RecipientRepository(session).list_for_document(document.id)


async def create_recipient(
    session: AsyncSession,
    document_id: int,
    user_id: int,
    team_id: Optional[int],
    data: RecipientCreate,
    request_metadata: Optional[RequestMetadata] = None,
) -> Recipient:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)

    email = data.email.lower()
    existing = await RecipientRepository(session).list_for_document(document.id)
    if any(r.email.lower() == email for r in existing):
        raise AppError(AppErrorCode.INVALID_REQUEST, "Recipient already exists")

    recipient = Recipient(
        document_id=document.id,
        email=email,
        name=data.name,
        role=data.role.value,
        signing_order=data.signing_order,
        token=generate_token(),
    )
    session.add(recipient)
    await session.flush()
    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.RECIPIENT_CREATED,
        data=_audit_data(recipient),
        user=await _acting_user(session, user_id),
        request_metadata=request_metadata,
    )
    await session.commit()
    await session.refresh(recipient)
    logger.debug(f"Created recipient {recipient.id} on document {document.id}")
    return recipient


async def update_recipient(
    session: AsyncSession,
    document_id: int,
    recipient_id: int,
    user_id: int,
    team_id: Optional[int],
    data: RecipientUpdate,
    request_metadata: Optional[RequestMetadata] = None,
) -> Recipient:
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)
    recipient = await get_document_recipient(session, document, recipient_id)
    if recipient.signing_status == SigningStatus.SIGNED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, "Cannot update a recipient that has already signed")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if changes["email"] != recipient.email:
            others = await RecipientRepository(session).list_for_document(document.id)
            if any(r.email.lower() == changes["email"] for r in others if r.id != recipient.id):
                raise AppError(AppErrorCode.INVALID_REQUEST, "Recipient already exists")
    if "role" in changes:
        changes["role"] = changes["role"].value

    for key, value in changes.items():
        setattr(recipient, key, value)
    session.add(recipient)
    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.RECIPIENT_UPDATED,
        data={**_audit_data(recipient), "changes": sorted(changes)},
        user=await _acting_user(session, user_id),
        request_metadata=request_metadata,
    )
    await session.commit()
    await session.refresh(recipient)
    return recipient


async def delete_recipient(
    session: AsyncSession,
    document_id: int,
    recipient_id: int,
    user_id: int,
    team_id: Optional[int] = None,
    request_metadata: Optional[RequestMetadata] = None,
) -> Recipient:
    """Remove a recipient together with the fields assigned to them."""
    document = await get_document_by_id(session, document_id, user_id, team_id)
    ensure_document_editable(document)
    recipient = await get_document_recipient(session, document, recipient_id)
    if recipient.signing_status == SigningStatus.SIGNED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, "Cannot delete a recipient that has already signed")

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.RECIPIENT_DELETED,
        data=_audit_data(recipient),
        user=await _acting_user(session, user_id),
        request_metadata=request_metadata,
    )
    await FieldRepository(session).delete_for_recipient(recipient.id)
    await session.delete(recipient)
    await session.commit()
    logger.debug(f"Deleted recipient {recipient_id} from document {document.id}")
    return recipient
