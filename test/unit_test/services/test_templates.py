"""Unit tests for template operations."""

import pytest
from sqlmodel import select

from signflow.core.database.entities import DocumentData, DocumentMeta, Field, Recipient, TemplateMeta
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import (
    DocumentSource,
    EntityStatus,
    RecipientRole,
    SendStatus,
    SigningStatus,
)
from signflow.core.models.io import (
    DocumentMetaInput,
    TemplateRecipientInput,
    TemplateRecipientSet,
    TemplateUpdate,
)
from signflow.services import templates as template_service


async def _document_recipients(session, document_id):
    result = await session.execute(
        select(Recipient).where(Recipient.document_id == document_id).order_by(Recipient.id)
    )
    return list(result.scalars().all())


class TestTemplateCrud:
    async def test_create_and_find(self, session, factory):
        owner = await factory.user()
        data = await factory.document_data()
        template = await template_service.create_template(session, "Intake", owner.id, data.id, form_key="intake")
        assert template.form_key == "intake"

        page = await template_service.find_templates(session, owner.id)
        assert [t.title for t in page.data] == ["Intake"]
        assert page.total_pages == 1

    async def test_create_requires_document_data(self, session, factory):
        owner = await factory.user()
        with pytest.raises(AppError, match="Document data not found"):
            await template_service.create_template(session, "Intake", owner.id, "missing")

    async def test_delete_hides_template(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        deleted = await template_service.delete_template(session, template.id, owner.id)
        assert deleted.deleted_at is not None
        with pytest.raises(AppError):
            await template_service.get_template_by_id(session, template.id, owner.id)
        assert (await template_service.find_templates(session, owner.id)).data == []

    async def test_delete_requires_ownership(self, session, factory):
        template = await factory.template(await factory.user())
        stranger = await factory.user(email="stranger@example.com")
        with pytest.raises(AppError, match="Template not found"):
            await template_service.delete_template(session, template.id, stranger.id)

    async def test_details(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        await factory.template_meta(template, subject="Welcome")
        placeholder = await factory.recipient(template=template, email="recipient.1@example.com")
        await factory.field(placeholder, template=template)

        details = await template_service.get_template_by_id(session, template.id, owner.id)
        assert details.meta.subject == "Welcome"
        assert [r.id for r in details.recipients] == [placeholder.id]
        assert len(details.fields) == 1
        assert details.document_data is not None


class TestPublicLookups:
    async def test_direct_link(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        placeholder = await factory.recipient(template=template)
        await factory.field(placeholder, template=template)
        link = await factory.direct_link(template, placeholder)

        details = await template_service.get_template_by_direct_link_token(session, link.token)
        assert details.template.id == template.id
        assert details.direct_link.token == link.token
        assert len(details.fields) == 1

    async def test_disabled_direct_link(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        link = await factory.direct_link(template, await factory.recipient(template=template), enabled=False)
        with pytest.raises(AppError) as exc_info:
            await template_service.get_template_by_direct_link_token(session, link.token)
        assert exc_info.value.code == AppErrorCode.NOT_FOUND

    async def test_external_id(self, session, factory):
        owner = await factory.user()
        await factory.template(owner, external_id="ext-1")
        details = await template_service.get_template_by_external_id(session, "ext-1")
        assert details.user.email == owner.email

    async def test_inactive_external_id(self, session, factory):
        owner = await factory.user()
        await factory.template(owner, external_id="ext-1", activity_status=EntityStatus.INACTIVE.value)
        with pytest.raises(AppError):
            await template_service.get_template_by_external_id(session, "ext-1")


class TestUpdates:
    async def test_update_columns_and_meta(self, session, factory):
        template = await factory.template(await factory.user())
        updated = await template_service.update_template_by_external_id(
            session,
            template.id,
            TemplateUpdate(title="Renamed", external_id="ext-9"),
            DocumentMetaInput(subject="Sign me", signing_order="SEQUENTIAL"),
        )
        assert updated.title == "Renamed"
        assert updated.external_id == "ext-9"
        meta = (await session.execute(select(TemplateMeta))).scalar_one()
        assert meta.subject == "Sign me"
        assert meta.signing_order == "SEQUENTIAL"

    async def test_empty_update_is_a_noop(self, session, factory):
        template = await factory.template(await factory.user())
        await template_service.update_template_by_external_id(session, template.id, TemplateUpdate(), None)
        assert (await session.execute(select(TemplateMeta))).first() is None

    async def test_update_document_data(self, session, factory):
        data = await factory.document_data()
        updated = await template_service.update_document_data(session, data.id, "aW5pdA==", "ZGF0YQ==")
        assert (updated.initial_data, updated.data) == ("aW5pdA==", "ZGF0YQ==")

    async def test_update_missing_document_data(self, session):
        with pytest.raises(AppError):
            await template_service.update_document_data(session, "missing", "a", "b")


class TestCreateDocumentFromTemplate:
    @pytest.fixture
    async def form(self, factory):
        owner = await factory.user()
        team = await factory.team(owner)
        template = await factory.template(owner, team=team, external_id="ext-form")
        await factory.template_meta(template, subject="Template subject")
        signer = await factory.recipient(
            template=template, email="recipient.1@example.com", name="Resident", signing_order=1
        )
        cc = await factory.recipient(template=template, email="manager@example.com", name="Manager", role=RecipientRole.CC)
        unfilled = await factory.recipient(template=template, email="recipient.3@example.com")
        await factory.field(signer, template=template)
        await factory.field(signer, template=template, page=2)
        await factory.field(unfilled, template=template)
        return owner, team, template, signer, cc

    async def test_generates_document(self, session, form):
        owner, team, template, signer, _ = form
        document = await template_service.create_document_from_template(
            session,
            template.id,
            owner.id,
            team.id,
            [TemplateRecipientInput(id=999, email="jane@example.com", name="Jane", signing_order=1)],
            resident_id="r-1",
            document_details={"companyName": "Acme Care"},
        )

        assert document.source == DocumentSource.TEMPLATE.value
        assert document.team_id == team.id
        assert document.template_id == template.id
        assert document.external_id == "ext-form"
        assert document.resident_id == "r-1"

        recipients = await _document_recipients(session, document.id)
        assert [(r.email, r.role) for r in recipients] == [("jane@example.com", "SIGNER"), ("manager@example.com", "CC")]
        jane, manager = recipients
        assert jane.send_status == SendStatus.NOT_SENT.value
        assert (manager.send_status, manager.signing_status) == (SendStatus.SENT.value, SigningStatus.SIGNED.value)

        fields = (await session.execute(select(Field).where(Field.document_id == document.id))).scalars().all()
        assert [f.recipient_id for f in fields] == [jane.id, jane.id]
        assert sorted(f.page for f in fields) == [1, 2]

        meta = (await session.execute(select(DocumentMeta).where(DocumentMeta.document_id == document.id))).scalar_one()
        assert meta.subject == "Template subject"
        assert meta.signing_order == "PARALLEL"

        data = await session.get(DocumentData, document.document_data_id)
        assert data.id != template.template_document_data_id

    async def test_matches_placeholder_by_id_and_applies_overrides(self, session, form):
        owner, team, template, _, cc = form
        document = await template_service.create_document_from_template(
            session,
            template.id,
            owner.id,
            team.id,
            [TemplateRecipientInput(id=cc.id, email="boss@example.com", name="Boss")],
            override={"title": "Custom title", "subject": "Override subject"},
        )
        assert document.title == "Custom title"
        emails = [r.email for r in await _document_recipients(session, document.id)]
        assert emails == ["boss@example.com"]
        meta = (await session.execute(select(DocumentMeta).where(DocumentMeta.document_id == document.id))).scalar_one()
        assert meta.subject == "Override subject"

    async def test_template_without_recipients(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        with pytest.raises(AppError, match="does not contain any recipients"):
            await template_service.create_document_from_template(session, template.id, owner.id, None, [])

    async def test_unknown_custom_document_data(self, session, form):
        owner, team, template, _, _ = form
        with pytest.raises(AppError, match="Custom document data not found"):
            await template_service.create_document_from_template(
                session, template.id, owner.id, team.id, [], custom_document_data_id="missing"
            )


class TestSetTemplateRecipients:
    async def test_replaces_placeholders(self, session, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        kept = await factory.recipient(template=template, email="a@example.com")
        dropped = await factory.recipient(template=template, email="b@example.com")
        await factory.field(kept, template=template)
        await factory.field(dropped, template=template)

        result = await template_service.set_template_recipients(
            session,
            template.id,
            [
                TemplateRecipientSet(id=kept.id, email="a@example.com", name="A", role=RecipientRole.VIEWER),
                TemplateRecipientSet(email="c@example.com", name="C", signing_order=2),
            ],
        )

        assert [(r.email, r.role) for r in result] == [("a@example.com", "VIEWER"), ("c@example.com", "SIGNER")]
        assert result[0].id == kept.id
        assert result[1].token
        assert (await session.execute(select(Field))).first() is None
        assert await session.get(Recipient, dropped.id) is None

    async def test_unknown_template(self, session):
        with pytest.raises(AppError):
            await template_service.set_template_recipients(session, 404, [])
