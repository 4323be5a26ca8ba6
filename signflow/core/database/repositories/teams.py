"""
Team repository.

Membership checks are the building block of every team-scoped authorization
predicate in the service layer.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.teams import Team, TeamMember
from ..entities.users import User
from .base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Repository for teams and their members."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Team)

    async def get_by_url(self, url: str) -> Optional[Team]:
        result = await self.session.execute(select(Team).where(Team.url == url))
        return result.scalars().first()

    async def get_member(self, team_id: int, user_id: int) -> Optional[TeamMember]:
        stmt = select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def is_member(self, team_id: int, user_id: int) -> bool:
        return await self.get_member(team_id, user_id) is not None

    async def list_members(self, team_id: int) -> List[tuple[TeamMember, User]]:
        stmt = (
            select(TeamMember, User)
            .join(User, User.id == TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.id)
        )
        result = await self.session.execute(stmt)
        return [(member, user) for member, user in result.all()]
