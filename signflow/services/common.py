"""
Helpers shared by the service modules.

Ownership: a row owned by a user may be personal (``team_id IS NULL``) or
belong to a team. ``owner_clause`` turns that rule into a SQL predicate so
every lookup applies it the same way.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import and_, exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from signflow.core.database.entities import TeamMember
from signflow.core.database.repositories import TeamRepository
from signflow.core.errors import AppError, AppErrorCode


def owner_clause(model: Any, user_id: int, team_id: Optional[int] = None):
    """Rows the user may act on: the team's rows when the user is a member, else personal rows."""
    if team_id is not None:
        is_member = exists(
            select(TeamMember.id).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        return and_(model.team_id == team_id, is_member)
    return and_(model.user_id == user_id, model.team_id.is_(None))


async def ensure_team_member(session: AsyncSession, team_id: Optional[int], user_id: int) -> None:
    """Raise NOT_FOUND unless ``team_id`` is unset or the user belongs to it."""
    if team_id is None:
        return
    if not await TeamRepository(session).is_member(team_id, user_id):
        raise AppError(AppErrorCode.NOT_FOUND, "Team not found")


def build_signing_url(token: str, webapp_url: Optional[str] = None) -> str:
    """Public URL a recipient opens to sign."""
    if webapp_url is None:
        from signflow.server.core.config import settings

        webapp_url = settings.webapp_url
    return f"{webapp_url.rstrip('/')}/sign/{token}"
