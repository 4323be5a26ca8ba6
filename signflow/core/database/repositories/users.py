"""
User and API token repositories.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from signflow.core.security import hash_string

from ..base import utc_now
from ..entities.users import ApiToken, User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()


class ApiTokenRepository(BaseRepository[ApiToken]):
    """Repository for API tokens. Lookups take the clear token and hash it."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ApiToken)

    async def get_valid_token(self, token: str) -> Optional[ApiToken]:
        """Return the unexpired token row matching ``token``, if any."""
        stmt = select(ApiToken).where(ApiToken.token == hash_string(token))
        result = await self.session.execute(stmt)
        api_token = result.scalars().first()
        if api_token is None:
            return None
        if api_token.expires is not None and api_token.expires < utc_now():
            return None
        return api_token
