"""
Document operations.

Lookups for the v1 API and the admin console, document creation, soft and hard
deletion, and completing a document on behalf of a recipient.

All functions take the request's ``AsyncSession`` and raise
``signflow.core.errors.AppError`` when a lookup misses or a predicate fails.
E-mails are sent only when a ``DocumentMailer`` is passed in, and the signed
copy is handed to Laravel only when a ``LaravelClient`` and file URL are given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from signflow.core.database import utc_now
from signflow.core.database.entities import (
    Document,
    DocumentData,
    DocumentMeta,
    Field,
    Recipient,
    Signature,
    Team,
    TeamMember,
    User,
)
from signflow.core.database.repositories import (
    FieldRepository,
    QueryBuilder,
    RecipientRepository,
    UserRepository,
)
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import (
    ADVANCED_FIELD_TYPES,
    AuditLogType,
    DocumentDataType,
    DocumentSigningOrder,
    DocumentSource,
    DocumentStatus,
    EntityStatus,
    FieldType,
    RecipientRole,
    SendStatus,
    SigningStatus,
)
from signflow.core.models.io import (
    AdminDocumentRead,
    DocumentMetaInput,
    DocumentRead,
    FindResult,
    RecipientCreate,
    RecipientRead,
    UserSummaryRead,
)
from signflow.core.security import generate_token
from signflow.email import DocumentMailer, MailDelivery
from signflow.integrations.laravel import LaravelApiError, LaravelClient

from .common import ensure_team_member, owner_clause
from .logs import AuditActor, RequestMetadata, create_document_audit_log, create_log
from .signed_documents import store_signed_document

logger = logging.getLogger(__name__)


@dataclass
class DocumentWithDetails:
    document: Document
    document_data: Optional[DocumentData]
    meta: Optional[DocumentMeta]
    recipients: List[Recipient] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)


def _visible():
    return (Document.activity_status == EntityStatus.ACTIVE.value, Document.deleted_at.is_(None))


async def _paginate(session: AsyncSession, stmt, page: int, per_page: int) -> tuple[int, list]:
    count = await QueryBuilder.count(session, stmt)
    limit, offset = QueryBuilder.page_window(page, per_page)
    result = await session.execute(stmt.limit(limit).offset(offset))
    return count, list(result.scalars().all())


async def _get_meta(session: AsyncSession, document_id: int) -> Optional[DocumentMeta]:
    result = await session.execute(select(DocumentMeta).where(DocumentMeta.document_id == document_id))
    return result.scalars().first()


async def _record_deliveries(
    session: AsyncSession,
    document_id: int,
    deliveries: List[Optional[MailDelivery]],
    request_metadata: Optional[RequestMetadata] = None,
) -> None:
    wrote = False
    for delivery in deliveries:
        if delivery is None or not delivery.success:
            continue
        await create_document_audit_log(
            session,
            document_id,
            AuditLogType.EMAIL_SENT,
            data=delivery.audit_data(),
            request_metadata=request_metadata,
        )
        wrote = True
    if wrote:
        await session.commit()


async def find_documents(
    session: AsyncSession, query: Optional[str] = None, page: int = 1, per_page: int = 10
) -> FindResult[AdminDocumentRead]:
    """Admin listing of every visible document, newest first, with owner and recipients."""
    stmt = select(Document).where(*_visible())
    if query:
        stmt = stmt.where(Document.title.ilike(f"%{query}%"))
    stmt = stmt.order_by(Document.created_at.desc(), Document.id.desc())
    count, documents = await _paginate(session, stmt, page, per_page)

    ids = [d.id for d in documents]
    owners: Dict[int, User] = {}
    recipients: Dict[int, List[Recipient]] = {i: [] for i in ids}
    if ids:
        user_ids = {d.user_id for d in documents}
        result = await session.execute(select(User).where(User.id.in_(user_ids)))
        owners = {u.id: u for u in result.scalars().all()}
        result = await session.execute(
            select(Recipient).where(Recipient.document_id.in_(ids)).order_by(Recipient.id)
        )
        for r in result.scalars().all():
            recipients[r.document_id].append(r)

    data = []
    for document in documents:
        row = AdminDocumentRead.model_validate(document)
        owner = owners.get(document.user_id)
        row.user = UserSummaryRead.model_validate(owner) if owner is not None else None
        row.recipients = [RecipientRead.model_validate(r) for r in recipients.get(document.id, [])]
        data.append(row)

    return FindResult[AdminDocumentRead](
        data=data,
        count=count,
        current_page=max(page, 1),
        per_page=per_page,
        total_pages=QueryBuilder.total_pages(count, per_page),
    )


async def find_documents_for_owner(
    session: AsyncSession,
    user_id: int,
    team_id: Optional[int] = None,
    page: int = 1,
    per_page: int = 10,
) -> FindResult[DocumentRead]:
    """Visible documents the user owns personally, or of ``team_id`` when given."""
    stmt = (
        select(Document)
        .where(owner_clause(Document, user_id, team_id), *_visible())
        .order_by(Document.created_at.desc(), Document.id.desc())
    )
    count, documents = await _paginate(session, stmt, page, per_page)
    return FindResult[DocumentRead](
        data=[DocumentRead.model_validate(d) for d in documents],
        count=count,
        current_page=max(page, 1),
        per_page=per_page,
        total_pages=QueryBuilder.total_pages(count, per_page),
    )


async def get_document_by_id(
    session: AsyncSession, document_id: int, user_id: int, team_id: Optional[int] = None
) -> Document:
    stmt = select(Document).where(Document.id == document_id, owner_clause(Document, user_id, team_id))
    result = await session.execute(stmt)
    document = result.scalars().first()
    if document is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document could not be found")
    return document


async def get_document_with_details_by_id(
    session: AsyncSession, document_id: int, user_id: int, team_id: Optional[int] = None
) -> DocumentWithDetails:
    """Visible document with its data, meta, recipients and fields."""
    stmt = select(Document).where(
        Document.id == document_id, owner_clause(Document, user_id, team_id), *_visible()
    )
    result = await session.execute(stmt)
    document = result.scalars().first()
    if document is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document could not be found")

    return DocumentWithDetails(
        document=document,
        document_data=await session.get(DocumentData, document.document_data_id),
        meta=await _get_meta(session, document.id),
        recipients=await RecipientRepository(session).list_for_document(document.id),
        fields=await FieldRepository(session).list_for_document(document.id),
    )


def _meta_values(meta: Optional[DocumentMetaInput]) -> Dict[str, Any]:
    return meta.model_dump(exclude_none=True) if meta is not None else {}


async def create_document(
    session: AsyncSession,
    user_id: int,
    team_id: Optional[int],
    title: str,
    document_data: str,
    form_key: Optional[str] = None,
    resident_id: Optional[str] = None,
    document_details: Optional[Dict[str, Any]] = None,
    meta: Optional[DocumentMetaInput] = None,
    *,
    external_id: Optional[str] = None,
    recipients: Optional[List[RecipientCreate]] = None,
    request_metadata: Optional[RequestMetadata] = None,
) -> Document:
    """Create a DRAFT document from a base64 payload, with optional meta and recipients."""
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise AppError(AppErrorCode.NOT_FOUND, "User not found")
    await ensure_team_member(session, team_id, user_id)

    data = DocumentData(type=DocumentDataType.BYTES_64.value, data=document_data, initial_data=document_data)
    session.add(data)
    await session.flush()

    document = Document(
        title=title,
        user_id=user_id,
        team_id=team_id,
        document_data_id=data.id,
        external_id=external_id,
        form_key=form_key,
        resident_id=resident_id,
        document_details=document_details,
        status=DocumentStatus.DRAFT.value,
        source=DocumentSource.DOCUMENT.value,
    )
    session.add(document)
    await session.flush()

    meta_values = _meta_values(meta)
    if meta_values:
        session.add(DocumentMeta(document_id=document.id, **meta_values))

    seen = set()
    for r in recipients or []:
        email = r.email.lower()
        if email in seen:
            raise AppError(AppErrorCode.INVALID_BODY, f"Duplicate recipient: {email}")
        seen.add(email)
        session.add(
            Recipient(
                document_id=document.id,
                email=email,
                name=r.name,
                role=r.role.value,
                signing_order=r.signing_order,
                token=generate_token(),
            )
        )

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_CREATED,
        data={"title": title, "source": {"type": DocumentSource.DOCUMENT.value}},
        user=user,
        request_metadata=request_metadata,
    )
    await session.commit()
    await session.refresh(document)
    logger.info(f"Created document {document.id} for user {user_id} (team={team_id})")
    return document


async def delete_document(
    session: AsyncSession,
    document_id: int,
    user_id: int,
    team_id: Optional[int] = None,
    request_metadata: Optional[RequestMetadata] = None,
    mailer: Optional[DocumentMailer] = None,
) -> Document:
    """Soft-delete a document for its owner or team, or hide it from a recipient.

    Owners and team members soft-delete the document and, unless disabled in the
    document's e-mail settings, recipients who already received it are told it
    was cancelled. A recipient only gets the document hidden from their view.
    """
    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        raise AppError(AppErrorCode.NOT_FOUND, "User not found")

    document = await session.get(Document, document_id)
    if document is None or (team_id is not None and team_id != document.team_id):
        raise AppError(AppErrorCode.NOT_FOUND, "Document not found")

    recipients = await RecipientRepository(session).list_for_document(document.id)
    is_owner = document.user_id == user_id
    is_team_member = False
    if document.team_id is not None:
        result = await session.execute(
            select(TeamMember.id).where(TeamMember.team_id == document.team_id, TeamMember.user_id == user_id)
        )
        is_team_member = result.first() is not None
    user_recipient = next((r for r in recipients if r.email == user.email), None)

    if not is_owner and not is_team_member and user_recipient is None:
        raise AppError(AppErrorCode.UNAUTHORIZED, "Not allowed")

    if (is_owner or is_team_member) and document.deleted_at is None:
        await create_document_audit_log(
            session,
            document.id,
            AuditLogType.DOCUMENT_DELETED,
            data={"type": "SOFT"},
            user=user,
            request_metadata=request_metadata,
        )
        document.deleted_at = utc_now()
        document.activity_status = EntityStatus.INACTIVE.value
        session.add(document)
        await session.commit()
        logger.info(f"Soft-deleted document {document.id} by user {user_id}")

        if mailer is not None:
            meta = await _get_meta(session, document.id)
            await mailer.send_document_cancelled(document, recipients, user, meta)

    if user_recipient is not None and user_recipient.document_deleted_at is None:
        user_recipient.document_deleted_at = utc_now()
        session.add(user_recipient)
        await session.commit()

    return document


async def super_delete_document(
    session: AsyncSession,
    document_id: int,
    request_metadata: Optional[RequestMetadata] = None,
    mailer: Optional[DocumentMailer] = None,
) -> Document:
    """Admin hard delete: the document and every row that depends on it are removed.

    The ``DOCUMENT_DELETED`` audit entry is kept.
    """
    document = await session.get(Document, document_id)
    if document is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document not found")

    recipients = await RecipientRepository(session).list_for_document(document.id)
    meta = await _get_meta(session, document.id)

    if mailer is not None and document.status == DocumentStatus.PENDING.value and recipients:
        owner = await session.get(User, document.user_id)
        if owner is not None:
            await mailer.send_document_cancelled(document, recipients, owner, meta)

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_DELETED,
        data={"type": "HARD"},
        request_metadata=request_metadata,
    )

    recipient_ids = [r.id for r in recipients]
    if recipient_ids:
        await session.execute(delete(Signature).where(Signature.recipient_id.in_(recipient_ids)))
    await session.execute(delete(Field).where(Field.document_id == document.id))
    await session.execute(delete(Recipient).where(Recipient.document_id == document.id))
    await session.execute(delete(DocumentMeta).where(DocumentMeta.document_id == document.id))
    data_id = document.document_data_id
    await session.delete(document)
    await session.flush()
    await session.execute(delete(DocumentData).where(DocumentData.id == data_id))
    await session.commit()
    logger.info(f"Hard-deleted document {document_id}")
    return document


async def get_resident_info(session: AsyncSession, token: Optional[str]) -> Dict[str, str]:
    """Resident id of the document a signing token belongs to."""
    if not token:
        raise AppError(AppErrorCode.INVALID_REQUEST, "Missing token")

    recipient = await RecipientRepository(session).get_by_token(token)
    if recipient is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Resident not found")

    document = await session.get(Document, recipient.document_id) if recipient.document_id else None
    if document is None or not document.resident_id:
        raise AppError(AppErrorCode.NOT_FOUND, "Resident ID not found")
    return {"resident_id": document.resident_id}


async def _submit_to_laravel(
    session: AsyncSession,
    laravel: LaravelClient,
    document: Document,
    recipients: List[Recipient],
    file_url: str,
    request_metadata: Optional[RequestMetadata] = None,
) -> None:
    """Hand the completed document to Laravel; failures are logged, never raised.

    The document is already COMPLETED at this point, so completion e-mails must
    still go out when Laravel is unavailable.
    """
    main_recipient = next((r for r in recipients if r.role != RecipientRole.CC.value), None)
    if main_recipient is None:
        await create_log(
            session,
            action="LARAVEL_SUBMISSION_SKIPPED_NO_RECIPIENT",
            message="Laravel submission skipped - no main recipient found",
            data={
                "documentId": document.id,
                "totalRecipients": len(recipients),
                "recipientRoles": [r.role for r in recipients],
            },
            metadata=request_metadata,
            user_id=document.user_id,
        )
        return

    try:
        stored = await store_signed_document(
            session, laravel, document, file_url, main_recipient, all_signed=True, request_metadata=request_metadata
        )
    except LaravelApiError as e:
        logger.error(f"Laravel submission failed for document {document.id}: {e}")
        await create_log(
            session,
            action="LARAVEL_SUBMISSION_ERROR",
            message="Error when submitting signed document to Laravel",
            data={"documentId": document.id, "error": str(e), "statusCode": e.status_code},
            metadata=request_metadata,
            user_id=document.user_id,
        )
        return

    if not stored.get("file_url"):
        await create_log(
            session,
            action="NO_FILE_URL_RETURNED",
            message="No file URL returned from Laravel submission",
            data={"documentId": document.id},
            metadata=request_metadata,
            user_id=document.user_id,
        )


def _ordered(recipients: List[Recipient]) -> List[Recipient]:
    # lowest signing order first, unset orders last, ties by id
    return sorted(recipients, key=lambda r: (r.signing_order is None, r.signing_order or 0, r.id or 0))


def is_recipients_turn(recipients: List[Recipient], recipient: Recipient) -> bool:
    """Under sequential signing, every non-CC recipient ahead of ``recipient`` must have signed."""
    for other in _ordered(recipients):
        if other.id == recipient.id:
            return True
        if other.role != RecipientRole.CC.value and other.signing_status != SigningStatus.SIGNED.value:
            return False
    return False


def is_required_field(f: Field) -> bool:
    if f.type in {t.value for t in ADVANCED_FIELD_TYPES}:
        return bool((f.field_meta or {}).get("required"))
    return f.type != FieldType.FREE_SIGNATURE.value


def fields_contain_unsigned_required_field(fields: List[Field]) -> bool:
    return any(is_required_field(f) and not f.inserted for f in fields)


async def complete_document_with_token(
    session: AsyncSession,
    token: str,
    document_id: int,
    *,
    request_metadata: Optional[RequestMetadata] = None,
    mailer: Optional[DocumentMailer] = None,
    laravel: Optional[LaravelClient] = None,
    file_url: Optional[str] = None,
) -> Document:
    """Record the recipient behind ``token`` as signed and advance the document.

    Remaining signers are notified (and, under sequential signing, the next one
    is invited). Once every non-CC recipient has signed the document is
    COMPLETED, completion e-mails go out and the signed copy is handed to
    Laravel.
    """
    result = await session.execute(
        select(Recipient).where(Recipient.token == token, Recipient.document_id == document_id)
    )
    recipient = result.scalars().first()
    document = await session.get(Document, document_id) if recipient is not None else None
    if recipient is None or document is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document not found")

    if document.status != DocumentStatus.PENDING.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, f"Document {document.id} must be pending")
    if recipient.signing_status == SigningStatus.SIGNED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, f"Recipient {recipient.id} has already signed")
    if recipient.signing_status == SigningStatus.REJECTED.value:
        raise AppError(
            AppErrorCode.UNKNOWN_ERROR, "Recipient has already rejected the document", status_code=400
        )

    meta = await _get_meta(session, document.id)
    sequential = meta is not None and meta.signing_order == DocumentSigningOrder.SEQUENTIAL.value
    recipients = await RecipientRepository(session).list_for_document(document.id)
    if sequential and not is_recipients_turn(recipients, recipient):
        raise AppError(
            AppErrorCode.INVALID_REQUEST,
            f"Recipient {recipient.id} attempted to complete the document before it was their turn",
        )

    result = await session.execute(
        select(Field).where(Field.document_id == document.id, Field.recipient_id == recipient.id)
    )
    if fields_contain_unsigned_required_field(list(result.scalars().all())):
        raise AppError(AppErrorCode.INVALID_REQUEST, f"Recipient {recipient.id} has unsigned fields")

    recipient.signing_status = SigningStatus.SIGNED.value
    recipient.signed_at = utc_now()
    session.add(recipient)
    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_RECIPIENT_COMPLETED,
        data={
            "recipientEmail": recipient.email,
            "recipientName": recipient.name,
            "recipientId": recipient.id,
            "recipientRole": recipient.role,
        },
        user=AuditActor(name=recipient.name, email=recipient.email),
        request_metadata=request_metadata,
    )
    await session.commit()
    logger.info(f"Recipient {recipient.id} completed document {document.id}")

    owner = await session.get(User, document.user_id)
    if mailer is not None and owner is not None:
        await mailer.send_recipient_signed(document, recipient, owner, meta)

    pending = [
        r
        for r in _ordered(recipients)
        if r.signing_status != SigningStatus.SIGNED.value and r.role != RecipientRole.CC.value
    ]
    if pending:
        if mailer is not None:
            await mailer.send_document_pending(document, recipient, meta)
        if sequential:
            next_recipient = pending[0]
            next_recipient.send_status = SendStatus.SENT.value
            session.add(next_recipient)
            await session.commit()
            if mailer is not None and owner is not None:
                delivery = await mailer.send_signing_request(document, next_recipient, owner, meta)
                await _record_deliveries(session, document.id, [delivery], request_metadata)
        return document

    document.status = DocumentStatus.COMPLETED.value
    document.completed_at = utc_now()
    session.add(document)
    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_COMPLETED,
        data={"transactionId": generate_token()},
        request_metadata=request_metadata,
    )
    await session.commit()
    logger.info(f"Document {document.id} completed")

    if laravel is not None and file_url:
        await _submit_to_laravel(session, laravel, document, recipients, file_url, request_metadata)

    if mailer is not None and owner is not None:
        team = await session.get(Team, document.team_id) if document.team_id else None
        deliveries = await mailer.send_document_completed(
            document,
            recipients,
            owner,
            meta,
            team_url=team.url if team is not None else None,
            document_url=document.document_url,
        )
        await _record_deliveries(session, document.id, list(deliveries), request_metadata)

    return document


async def reject_document_with_token(
    session: AsyncSession,
    token: str,
    document_id: int,
    reason: Optional[str] = None,
    *,
    request_metadata: Optional[RequestMetadata] = None,
    mailer: Optional[DocumentMailer] = None,
) -> Document:
    """Record the recipient behind ``token`` as having rejected the document.

    The whole document becomes REJECTED. The owner is told who rejected it and
    why, and the recipient gets a confirmation.
    """
    result = await session.execute(
        select(Recipient).where(Recipient.token == token, Recipient.document_id == document_id)
    )
    recipient = result.scalars().first()
    document = await session.get(Document, document_id) if recipient is not None else None
    if recipient is None or document is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document not found")

    if document.status != DocumentStatus.PENDING.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, f"Document {document.id} must be pending")
    if recipient.signing_status != SigningStatus.NOT_SIGNED.value:
        raise AppError(AppErrorCode.INVALID_REQUEST, f"Recipient {recipient.id} has already signed or rejected")

    recipient.signing_status = SigningStatus.REJECTED.value
    recipient.rejection_reason = reason or None
    document.status = DocumentStatus.REJECTED.value
    session.add(recipient)
    session.add(document)
    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_RECIPIENT_REJECTED,
        data={
            "recipientEmail": recipient.email,
            "recipientName": recipient.name,
            "recipientId": recipient.id,
            "recipientRole": recipient.role,
            "reason": reason or "",
        },
        user=AuditActor(name=recipient.name, email=recipient.email),
        request_metadata=request_metadata,
    )
    await session.commit()
    logger.info(f"Recipient {recipient.id} rejected document {document.id}")

    owner = await session.get(User, document.user_id)
    if mailer is not None and owner is not None:
        meta = await _get_meta(session, document.id)
        team = await session.get(Team, document.team_id) if document.team_id else None
        await mailer.send_rejection_confirmed(document, recipient, owner, meta)
        await mailer.send_document_rejected(
            document, recipient, owner, meta, team_url=team.url if team is not None else None
        )
        recipient.send_status = SendStatus.SENT.value
        session.add(recipient)
        await session.commit()

    return document
