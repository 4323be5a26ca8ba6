"""
Template operations.

Templates are reusable forms: a PDF plus placeholder recipients and fields.
Besides owner-scoped CRUD, templates can be resolved publicly through an
enabled direct link or by the ``external_id`` the forms backend assigned, and
turned into a real document for concrete recipients.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from signflow.core.database import utc_now
from signflow.core.database.entities import (
    Document,
    DocumentData,
    DocumentMeta,
    Field,
    Recipient,
    Template,
    TemplateDirectLink,
    TemplateMeta,
    User,
)
from signflow.core.database.repositories import FieldRepository, QueryBuilder, RecipientRepository
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import (
    AuditLogType,
    DocumentSigningOrder,
    DocumentSource,
    EntityStatus,
    RecipientRole,
    SendStatus,
    SigningStatus,
)
from signflow.core.models.io import (
    DocumentMetaInput,
    FindResult,
    TemplateRead,
    TemplateRecipientInput,
    TemplateRecipientSet,
    TemplateUpdate,
)
from signflow.core.security import generate_token

from .common import ensure_team_member, owner_clause
from .logs import RequestMetadata, create_document_audit_log, create_log

logger = logging.getLogger(__name__)

_META_FIELDS = (
    "subject",
    "message",
    "timezone",
    "date_format",
    "redirect_url",
    "signing_order",
    "language",
    "typed_signature_enabled",
    "distribution_method",
    "email_settings",
)


@dataclass
class TemplateWithDetails:
    template: Template
    document_data: Optional[DocumentData] = None
    meta: Optional[TemplateMeta] = None
    direct_link: Optional[TemplateDirectLink] = None
    recipients: List[Recipient] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    user: Optional[User] = None


def _resolvable():
    return (Template.activity_status != EntityStatus.INACTIVE.value, Template.deleted_at.is_(None))


async def _get_meta(session: AsyncSession, template_id: int) -> Optional[TemplateMeta]:
    result = await session.execute(select(TemplateMeta).where(TemplateMeta.template_id == template_id))
    return result.scalars().first()


async def _get_direct_link(session: AsyncSession, template_id: int) -> Optional[TemplateDirectLink]:
    result = await session.execute(
        select(TemplateDirectLink).where(TemplateDirectLink.template_id == template_id)
    )
    return result.scalars().first()


async def _details(session: AsyncSession, template: Template, *, with_user: bool = False) -> TemplateWithDetails:
    return TemplateWithDetails(
        template=template,
        document_data=await session.get(DocumentData, template.template_document_data_id),
        meta=await _get_meta(session, template.id),
        direct_link=await _get_direct_link(session, template.id),
        recipients=await RecipientRepository(session).list_for_template(template.id),
        fields=await FieldRepository(session).list_for_template(template.id),
        user=await session.get(User, template.user_id) if with_user else None,
    )


async def create_template(
    session: AsyncSession,
    title: str,
    user_id: int,
    template_document_data_id: str,
    team_id: Optional[int] = None,
    form_key: str = "",
) -> Template:
    await ensure_team_member(session, team_id, user_id)
    if await session.get(DocumentData, template_document_data_id) is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document data not found")

    template = Template(
        title=title,
        user_id=user_id,
        team_id=team_id,
        template_document_data_id=template_document_data_id,
        form_key=form_key,
    )
    session.add(template)
    await session.commit()
    await session.refresh(template)
    logger.info(f"Created template {template.id} for user {user_id} (team={team_id})")
    return template


async def delete_template(
    session: AsyncSession, template_id: int, user_id: int, team_id: Optional[int] = None
) -> Template:
    """Soft delete: the template keeps its rows but can no longer be resolved."""
    result = await session.execute(
        select(Template).where(Template.id == template_id, owner_clause(Template, user_id, team_id))
    )
    template = result.scalars().first()
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")

    template.deleted_at = utc_now()
    session.add(template)
    await session.commit()
    await session.refresh(template)
    return template


async def get_template_by_id(
    session: AsyncSession, template_id: int, user_id: int, team_id: Optional[int] = None
) -> TemplateWithDetails:
    result = await session.execute(
        select(Template).where(
            Template.id == template_id,
            owner_clause(Template, user_id, team_id),
            Template.deleted_at.is_(None),
        )
    )
    template = result.scalars().first()
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")
    return await _details(session, template)


async def find_templates(
    session: AsyncSession,
    user_id: int,
    team_id: Optional[int] = None,
    page: int = 1,
    per_page: int = 10,
) -> FindResult[TemplateRead]:
    stmt = (
        select(Template)
        .where(owner_clause(Template, user_id, team_id), Template.deleted_at.is_(None))
        .order_by(Template.created_at.desc(), Template.id.desc())
    )
    count = await QueryBuilder.count(session, stmt)
    limit, offset = QueryBuilder.page_window(page, per_page)
    result = await session.execute(stmt.limit(limit).offset(offset))
    return FindResult[TemplateRead](
        data=[TemplateRead.model_validate(t) for t in result.scalars().all()],
        count=count,
        current_page=max(page, 1),
        per_page=per_page,
        total_pages=QueryBuilder.total_pages(count, per_page),
    )


async def get_template_by_direct_link_token(session: AsyncSession, token: str) -> TemplateWithDetails:
    """Template behind an enabled direct link. ``fields`` holds every recipient's fields."""
    stmt = (
        select(Template)
        .join(TemplateDirectLink, TemplateDirectLink.template_id == Template.id)
        .where(TemplateDirectLink.token == token, TemplateDirectLink.enabled.is_(True), *_resolvable())
    )
    result = await session.execute(stmt)
    template = result.scalars().first()
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")

    details = await _details(session, template)
    recipient_ids = {r.id for r in details.recipients}
    details.fields = [f for f in details.fields if f.recipient_id in recipient_ids]
    return details


async def get_template_by_external_id(session: AsyncSession, external_id: str) -> TemplateWithDetails:
    """Active template with the given ``external_id``, including its owner."""
    result = await session.execute(select(Template).where(Template.external_id == external_id, *_resolvable()))
    template = result.scalars().first()
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")
    return await _details(session, template, with_user=True)


async def update_template_by_external_id(
    session: AsyncSession,
    template_id: int,
    data: Optional[TemplateUpdate] = None,
    meta: Optional[DocumentMetaInput] = None,
) -> Template:
    """Update template columns and upsert its meta; a no-op when both are empty."""
    template = await session.get(Template, template_id)
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")

    changes = data.model_dump(exclude_unset=True, exclude_none=True) if data is not None else {}
    meta_changes = meta.model_dump(exclude_unset=True, exclude_none=True) if meta is not None else {}
    if not changes and not meta_changes:
        return template

    for key, value in changes.items():
        setattr(template, key, getattr(value, "value", value))
    session.add(template)

    existing = await _get_meta(session, template.id)
    if existing is None:
        existing = TemplateMeta(template_id=template.id)
    for key, value in meta_changes.items():
        setattr(existing, key, value)
    session.add(existing)

    await session.commit()
    await session.refresh(template)
    logger.debug(f"Updated template {template.id}: {sorted(changes)} meta={sorted(meta_changes)}")
    return template


async def update_document_data(
    session: AsyncSession, document_data_id: str, initial_data: str, data: str
) -> DocumentData:
    document_data = await session.get(DocumentData, document_data_id)
    if document_data is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document data not found")
    document_data.initial_data = initial_data
    document_data.data = data
    session.add(document_data)
    await session.commit()
    await session.refresh(document_data)
    return document_data


def _match_recipient(
    template_recipient: Recipient, recipients: List[TemplateRecipientInput]
) -> Optional[TemplateRecipientInput]:
    for candidate in recipients:
        if candidate.signing_order is not None and template_recipient.signing_order is not None:
            if candidate.signing_order == template_recipient.signing_order:
                return candidate
        elif candidate.id == template_recipient.id:
            return candidate
    return None


def _document_meta(template_meta: Optional[TemplateMeta], override: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for key in _META_FIELDS:
        value = override.get(key)
        if value is None and template_meta is not None:
            value = getattr(template_meta, key)
        if value is not None:
            values[key] = value
    values.setdefault("signing_order", DocumentSigningOrder.PARALLEL.value)
    return values


async def create_document_from_template(
    session: AsyncSession,
    template_id: int,
    user_id: int,
    team_id: Optional[int],
    recipients: List[TemplateRecipientInput],
    external_id: Optional[str] = None,
    custom_document_data_id: Optional[str] = None,
    override: Optional[Dict[str, Any]] = None,
    form_key: Optional[str] = None,
    resident_id: Optional[str] = None,
    document_details: Optional[Dict[str, Any]] = None,
    request_metadata: Optional[RequestMetadata] = None,
) -> Document:
    """Instantiate a document from a template for concrete recipients.

    Template placeholders are paired with ``recipients`` by signing order when
    both sides carry one, otherwise by id. Placeholders left with a
    ``recipient`` address are skipped. CC recipients start out sent and signed.
    Each placeholder's fields are copied onto the new recipient.
    """
    override = override or {}
    result = await session.execute(
        select(Template).where(Template.id == template_id, owner_clause(Template, user_id, team_id))
    )
    template = result.scalars().first()
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")

    template_recipients = await RecipientRepository(session).list_for_template(template.id)
    if not template_recipients:
        raise AppError(AppErrorCode.INVALID_BODY, "The template does not contain any recipients.")
    template_fields = await FieldRepository(session).list_for_template(template.id)

    final_recipients = []
    for placeholder in template_recipients:
        found = _match_recipient(placeholder, recipients)
        final_recipients.append(
            {
                "template_recipient_id": placeholder.id,
                "name": (found.name or "") if found else placeholder.name,
                "email": found.email if found else placeholder.email,
                "role": placeholder.role,
                "signing_order": found.signing_order
                if found and found.signing_order is not None
                else placeholder.signing_order,
                "expired": (found.expired if found else None) or placeholder.expired,
            }
        )

    parent_data = await session.get(DocumentData, template.template_document_data_id)
    if custom_document_data_id:
        parent_data = await session.get(DocumentData, custom_document_data_id)
        if parent_data is None:
            raise AppError(AppErrorCode.NOT_FOUND, "Custom document data not found")
    if parent_data is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Document data not found")

    document_data = DocumentData(type=parent_data.type, data=parent_data.data, initial_data=parent_data.initial_data)
    session.add(document_data)
    await session.flush()

    document = Document(
        source=DocumentSource.TEMPLATE.value,
        external_id=external_id or template.external_id,
        template_id=template.id,
        user_id=user_id,
        team_id=template.team_id,
        title=override.get("title") or template.title,
        document_data_id=document_data.id,
        form_key=form_key,
        resident_id=resident_id,
        document_details=document_details,
        visibility=template.visibility,
    )
    session.add(document)
    await session.flush()

    template_meta = await _get_meta(session, template.id)
    session.add(DocumentMeta(document_id=document.id, **_document_meta(template_meta, override)))

    created: List[Recipient] = []
    for final in final_recipients:
        if not final["email"] or "recipient" in final["email"]:
            continue
        is_cc = final["role"] == RecipientRole.CC.value
        recipient = Recipient(
            document_id=document.id,
            email=final["email"],
            name=final["name"],
            role=final["role"],
            signing_order=final["signing_order"],
            send_status=SendStatus.SENT.value if is_cc else SendStatus.NOT_SENT.value,
            signing_status=SigningStatus.SIGNED.value if is_cc else SigningStatus.NOT_SIGNED.value,
            token=generate_token(),
            expired=final["expired"],
        )
        session.add(recipient)
        created.append(recipient)
    await session.flush()

    try:
        for final in final_recipients:
            recipient = next(
                (
                    r
                    for r in created
                    if r.email == final["email"] and r.signing_order == final["signing_order"]
                ),
                None,
            )
            if recipient is None:
                continue
            for source in template_fields:
                if source.recipient_id != final["template_recipient_id"]:
                    continue
                session.add(
                    Field(
                        document_id=document.id,
                        recipient_id=recipient.id,
                        type=source.type,
                        page=source.page,
                        position_x=source.position_x,
                        position_y=source.position_y,
                        width=source.width,
                        height=source.height,
                        custom_text="",
                        inserted=False,
                        field_meta=source.field_meta,
                    )
                )
        await session.flush()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Field creation from template {template.id} failed: {e}", exc_info=True)
        await create_log(
            session,
            action="FIELD_CREATION_FAILED",
            message="Error creating fields from template",
            data={"error": str(e), "templateId": template.id, "userId": user_id},
            metadata=request_metadata,
            user_id=user_id,
        )
        raise

    await create_document_audit_log(
        session,
        document.id,
        AuditLogType.DOCUMENT_CREATED,
        data={
            "title": document.title,
            "source": {"type": DocumentSource.TEMPLATE.value, "templateId": template.id},
        },
        request_metadata=request_metadata,
    )
    await session.commit()
    await session.refresh(document)
    logger.info(f"Created document {document.id} from template {template.id}")
    return document


async def set_template_recipients(
    session: AsyncSession,
    template_id: int,
    recipients: List[TemplateRecipientSet],
) -> List[Recipient]:
    """Replace a template's placeholder recipients.

    Incoming entries update the existing placeholder with the same id or email
    and create the rest. Placeholders not mentioned are deleted with their
    fields, as are the fields of a placeholder whose role changes to CC or VIEWER.
    """
    template = await session.get(Template, template_id)
    if template is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Template not found")

    existing = await RecipientRepository(session).list_for_template(template.id)

    def _persisted(item: TemplateRecipientSet) -> Optional[Recipient]:
        return next((r for r in existing if r.id == item.id or r.email == item.email), None)

    removed = [r for r in existing if not any(item.id == r.id or item.email == r.email for item in recipients)]

    result: List[Recipient] = []
    for item in recipients:
        persisted = _persisted(item)
        role = item.role.value
        if persisted is None:
            persisted = Recipient(template_id=template.id, token=generate_token(), email=item.email)
        elif persisted.role != role and role in (RecipientRole.CC.value, RecipientRole.VIEWER.value):
            await FieldRepository(session).delete_for_recipient(persisted.id)
        persisted.name = item.name
        persisted.email = item.email
        persisted.role = role
        persisted.signing_order = item.signing_order
        session.add(persisted)
        result.append(persisted)

    removed_ids = [r.id for r in removed]
    if removed_ids:
        await session.execute(delete(Field).where(Field.recipient_id.in_(removed_ids)))
        await session.execute(delete(Recipient).where(Recipient.id.in_(removed_ids)))

    await session.commit()
    for recipient in result:
        await session.refresh(recipient)
    logger.debug(f"Template {template.id}: {len(result)} recipient(s) set, {len(removed_ids)} removed")
    return sorted(result, key=lambda r: r.id)
