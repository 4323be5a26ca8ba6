"""
Recipient and field repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.recipients import Field, Recipient
from .base import BaseRepository


class RecipientRepository(BaseRepository[Recipient]):
    """Repository for document and template recipients."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Recipient)

    async def get_by_token(self, token: str) -> Optional[Recipient]:
        result = await self.session.execute(select(Recipient).where(Recipient.token == token))
        return result.scalars().first()

    async def list_for_document(self, document_id: int) -> List[Recipient]:
        stmt = select(Recipient).where(Recipient.document_id == document_id).order_by(Recipient.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_template(self, template_id: int) -> List[Recipient]:
        stmt = select(Recipient).where(Recipient.template_id == template_id).order_by(Recipient.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class FieldRepository(BaseRepository[Field]):
    """Repository for placed fields."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Field)

    async def list_for_document(self, document_id: int) -> List[Field]:
        stmt = select(Field).where(Field.document_id == document_id).order_by(Field.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_template(self, template_id: int) -> List[Field]:
        stmt = select(Field).where(Field.template_id == template_id).order_by(Field.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_recipient(self, recipient_id: int) -> None:
        await self.session.execute(delete(Field).where(Field.recipient_id == recipient_id))
