"""
Team membership management.

Any member may list a team's members. Changing a role or removing a member
requires the caller to be a team ADMIN, and the team owner can be neither
demoted nor removed.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import Team, TeamMember
from signflow.core.database.repositories import TeamRepository
from signflow.core.errors import AppError, AppErrorCode
from signflow.core.models.domain import TeamMemberRole
from signflow.core.models.io import TeamMemberRead

logger = logging.getLogger(__name__)


async def _get_team(repo: TeamRepository, team_id: int) -> Team:
    team = await repo.get_by_id(team_id)
    if team is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Team not found")
    return team


async def _require_admin(repo: TeamRepository, team_id: int, user_id: int) -> None:
    member = await repo.get_member(team_id, user_id)
    if member is None:
        raise AppError(AppErrorCode.NOT_FOUND, "Team not found")
    if member.role != TeamMemberRole.ADMIN.value:
        raise AppError(AppErrorCode.UNAUTHORIZED, "You do not have permission to manage this team")


async def _get_member(session: AsyncSession, team_id: int, member_id: int) -> TeamMember:
    member = await session.get(TeamMember, member_id)
    if member is None or member.team_id != team_id:
        raise AppError(AppErrorCode.NOT_FOUND, "Team member not found")
    return member


async def find_team_members(session: AsyncSession, team_id: int, acting_user_id: int) -> List[TeamMemberRead]:
    repo = TeamRepository(session)
    await _get_team(repo, team_id)
    if not await repo.is_member(team_id, acting_user_id):
        raise AppError(AppErrorCode.NOT_FOUND, "Team not found")
    return [
        TeamMemberRead(id=member.id, user_id=user.id, email=user.email, name=user.name, role=member.role)
        for member, user in await repo.list_members(team_id)
    ]


async def update_team_member_role(
    session: AsyncSession, team_id: int, member_id: int, acting_user_id: int, role: TeamMemberRole
) -> TeamMember:
    repo = TeamRepository(session)
    team = await _get_team(repo, team_id)
    await _require_admin(repo, team_id, acting_user_id)
    member = await _get_member(session, team_id, member_id)
    if member.user_id == team.owner_user_id and role != TeamMemberRole.ADMIN:
        raise AppError(AppErrorCode.INVALID_REQUEST, "The team owner must remain an admin")

    member.role = role.value
    session.add(member)
    await session.commit()
    await session.refresh(member)
    logger.info(f"Team {team_id}: member {member_id} role set to {role.value} by user {acting_user_id}")
    return member


async def remove_team_member(
    session: AsyncSession, team_id: int, member_id: int, acting_user_id: int
) -> TeamMember:
    repo = TeamRepository(session)
    team = await _get_team(repo, team_id)
    await _require_admin(repo, team_id, acting_user_id)
    member = await _get_member(session, team_id, member_id)
    if member.user_id == team.owner_user_id:
        raise AppError(AppErrorCode.INVALID_REQUEST, "The team owner cannot be removed")

    await session.delete(member)
    await session.commit()
    logger.info(f"Team {team_id}: member {member_id} removed by user {acting_user_id}")
    return member
