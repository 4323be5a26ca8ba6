"""Unit tests for field validation and placement."""

import pytest

from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import DocumentStatus, FieldType, SigningStatus
from signflow.core.models.io import FieldCreate, FieldUpdate
from signflow.services import fields as field_service
from signflow.services.fields import validate_field_input


def field_input(recipient_id: int, type: FieldType = FieldType.SIGNATURE, **kwargs) -> FieldCreate:
    values = dict(page_number=1, page_x=10.0, page_y=20.0, page_width=15.0, page_height=5.0)
    values.update(kwargs)
    return FieldCreate(recipient_id=recipient_id, type=type, **values)


class TestValidateFieldInput:
    def test_accepts_basic_field(self):
        validate_field_input(FieldType.SIGNATURE, 1, None)

    @pytest.mark.parametrize("page", [0, -1])
    def test_rejects_bad_page(self, page):
        with pytest.raises(AppError, match="Invalid page number"):
            validate_field_input(FieldType.SIGNATURE, page, None)

    def test_rejects_free_signature(self):
        with pytest.raises(AppError) as exc_info:
            validate_field_input(FieldType.FREE_SIGNATURE, 1, None)
        assert exc_info.value.code == AppErrorCode.INVALID_BODY

    def test_advanced_field_needs_meta(self):
        with pytest.raises(AppError, match="Field meta is required"):
            validate_field_input(FieldType.DROPDOWN, 1, None)

    def test_advanced_field_meta_must_match(self):
        with pytest.raises(AppError, match="does not match"):
            validate_field_input(FieldType.NUMBER, 1, {"type": "text"})
        validate_field_input(FieldType.NUMBER, 1, {"type": "number"})


@pytest.fixture
async def placed(factory):
    owner = await factory.user()
    document = await factory.document(owner)
    recipient = await factory.recipient(document)
    return owner, document, recipient


class TestCreateFields:
    async def test_creates_all(self, session, placed):
        owner, document, recipient = placed
        created = await field_service.create_fields(
            session,
            document.id,
            owner.id,
            None,
            [
                field_input(recipient.id),
                field_input(recipient.id, FieldType.TEXT, page_number=2, field_meta={"type": "text"}),
            ],
        )
        assert [f.type for f in created] == ["SIGNATURE", "TEXT"]
        assert created[1].page == 2
        assert created[0].position_x == 10.0
        listed = await field_service.get_fields_for_document(session, document.id, owner.id)
        assert [f.id for f in listed] == [f.id for f in created]

    async def test_one_invalid_field_stores_nothing(self, session, placed):
        owner, document, recipient = placed
        with pytest.raises(AppError):
            await field_service.create_fields(
                session,
                document.id,
                owner.id,
                None,
                [field_input(recipient.id), field_input(recipient.id, page_number=0)],
            )
        assert await field_service.get_fields_for_document(session, document.id, owner.id) == []

    async def test_recipient_must_belong_to_document(self, session, factory, placed):
        owner, document, _ = placed
        stray = await factory.recipient(await factory.document(owner, title="Other"))
        with pytest.raises(AppError, match="Recipient not found"):
            await field_service.create_fields(session, document.id, owner.id, None, [field_input(stray.id)])

    async def test_signed_recipient(self, session, factory, placed):
        owner, document, _ = placed
        signed = await factory.recipient(
            document, email="done@example.com", signing_status=SigningStatus.SIGNED.value
        )
        with pytest.raises(AppError, match="already signed"):
            await field_service.create_fields(session, document.id, owner.id, None, [field_input(signed.id)])

    async def test_completed_document(self, session, factory):
        owner = await factory.user()
        document = await factory.document(owner, status=DocumentStatus.COMPLETED)
        recipient = await factory.recipient(document)
        with pytest.raises(AppError, match="already completed"):
            await field_service.create_fields(session, document.id, owner.id, None, [field_input(recipient.id)])


class TestUpdateAndDeleteField:
    async def test_update_moves_field(self, session, factory, placed):
        owner, document, recipient = placed
        field = await factory.field(recipient, document=document)
        updated = await field_service.update_field(
            session, document.id, field.id, owner.id, None, FieldUpdate(page_x=55.5, page_number=3)
        )
        assert updated.position_x == 55.5
        assert updated.page == 3
        assert updated.position_y == 20

    async def test_update_revalidates_type(self, session, factory, placed):
        owner, document, recipient = placed
        field = await factory.field(recipient, document=document)
        with pytest.raises(AppError, match="Field meta is required"):
            await field_service.update_field(
                session, document.id, field.id, owner.id, None, FieldUpdate(type=FieldType.RADIO)
            )

    async def test_delete(self, session, factory, placed):
        owner, document, recipient = placed
        field = await factory.field(recipient, document=document)
        await field_service.delete_field(session, document.id, field.id, owner.id)
        assert await field_service.get_fields_for_document(session, document.id, owner.id) == []

    async def test_delete_unknown_field(self, session, placed):
        owner, document, _ = placed
        with pytest.raises(AppError, match="Field not found"):
            await field_service.delete_field(session, document.id, 999, owner.id)
