"""Unit tests for recipient operations."""

import pytest
from sqlmodel import select

from signflow.core.database.entities import DocumentAuditLog, Field
from signflow.core.errors import AppError
from signflow.core.models.domain import AuditLogType, DocumentStatus, RecipientRole, SigningStatus
from signflow.core.models.io import RecipientCreate, RecipientUpdate
from signflow.services import recipients as recipient_service


@pytest.fixture
async def owned(factory):
    owner = await factory.user()
    document = await factory.document(owner)
    return owner, document


class TestCreateRecipient:
    async def test_creates_with_token_and_audit_entry(self, session, owned):
        owner, document = owned
        recipient = await recipient_service.create_recipient(
            session,
            document.id,
            owner.id,
            None,
            RecipientCreate(email="New@Example.com", name="New", role=RecipientRole.APPROVER, signing_order=2),
        )
        assert recipient.email == "new@example.com"
        assert recipient.role == "APPROVER"
        assert recipient.signing_order == 2
        assert recipient.token

        entry = (await session.execute(select(DocumentAuditLog))).scalar_one()
        assert entry.type == AuditLogType.RECIPIENT_CREATED.value
        assert entry.data["recipientEmail"] == "new@example.com"
        assert entry.user_id == owner.id

    async def test_duplicate_email(self, session, factory, owned):
        owner, document = owned
        await factory.recipient(document, email="dup@example.com")
        with pytest.raises(AppError, match="Recipient already exists"):
            await recipient_service.create_recipient(
                session, document.id, owner.id, None, RecipientCreate(email="DUP@example.com")
            )

    async def test_completed_document(self, session, factory):
        owner = await factory.user()
        document = await factory.document(owner, status=DocumentStatus.COMPLETED)
        with pytest.raises(AppError, match="already completed"):
            await recipient_service.create_recipient(
                session, document.id, owner.id, None, RecipientCreate(email="x@example.com")
            )

    async def test_other_users_document(self, session, factory, owned):
        _, document = owned
        stranger = await factory.user(email="stranger@example.com")
        with pytest.raises(AppError) as exc_info:
            await recipient_service.create_recipient(
                session, document.id, stranger.id, None, RecipientCreate(email="x@example.com")
            )
        assert exc_info.value.status == 404


class TestListRecipients:
    async def test_lists_in_creation_order(self, session, factory, owned):
        owner, document = owned
        a = await factory.recipient(document, email="a@example.com")
        b = await factory.recipient(document, email="b@example.com")
        result = await recipient_service.get_recipients_for_document(session, document.id, owner.id)
        assert [r.id for r in result] == [a.id, b.id]


class TestUpdateRecipient:
    async def test_updates_given_values(self, session, factory, owned):
        owner, document = owned
        recipient = await factory.recipient(document)
        updated = await recipient_service.update_recipient(
            session,
            document.id,
            recipient.id,
            owner.id,
            None,
            RecipientUpdate(name="Renamed", role=RecipientRole.VIEWER),
        )
        assert updated.name == "Renamed"
        assert updated.role == "VIEWER"
        assert updated.email == "signer@example.com"

    async def test_email_collision(self, session, factory, owned):
        owner, document = owned
        await factory.recipient(document, email="taken@example.com")
        recipient = await factory.recipient(document)
        with pytest.raises(AppError, match="Recipient already exists"):
            await recipient_service.update_recipient(
                session, document.id, recipient.id, owner.id, None, RecipientUpdate(email="taken@example.com")
            )

    async def test_signed_recipient_is_locked(self, session, factory, owned):
        owner, document = owned
        recipient = await factory.recipient(document, signing_status=SigningStatus.SIGNED.value)
        with pytest.raises(AppError, match="already signed"):
            await recipient_service.update_recipient(
                session, document.id, recipient.id, owner.id, None, RecipientUpdate(name="x")
            )

    async def test_recipient_of_another_document(self, session, factory, owned):
        owner, document = owned
        other = await factory.document(owner, title="Other")
        recipient = await factory.recipient(other)
        with pytest.raises(AppError, match="Recipient not found"):
            await recipient_service.update_recipient(
                session, document.id, recipient.id, owner.id, None, RecipientUpdate(name="x")
            )


class TestDeleteRecipient:
    async def test_removes_recipient_and_fields(self, session, factory, owned):
        owner, document = owned
        recipient = await factory.recipient(document)
        await factory.field(recipient, document=document)

        await recipient_service.delete_recipient(session, document.id, recipient.id, owner.id)

        assert await recipient_service.get_recipients_for_document(session, document.id, owner.id) == []
        assert (await session.execute(select(Field))).first() is None
        types = (await session.execute(select(DocumentAuditLog.type))).scalars().all()
        assert types == [AuditLogType.RECIPIENT_DELETED.value]

    async def test_signed_recipient_cannot_be_removed(self, session, factory, owned):
        owner, document = owned
        recipient = await factory.recipient(document, signing_status=SigningStatus.SIGNED.value)
        with pytest.raises(AppError) as exc_info:
            await recipient_service.delete_recipient(session, document.id, recipient.id, owner.id)
        assert exc_info.value.status == 400
