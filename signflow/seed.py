"""
Database seed.

Creates the initial admin user and the team they administer. Safe to run any
number of times: existing rows are updated in place.

Usage::

    python -m signflow.seed
"""

import asyncio
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database.entities import Team, TeamMember, User
from signflow.core.database.repositories import TeamRepository, UserRepository
from signflow.core.logging_config import get_logger, setup_logging
from signflow.core.models.domain import Role, TeamMemberRole
from signflow.core.security import hash_password
from signflow.server.core.config import Settings

logger = get_logger(__name__)


@dataclass
class SeedResult:
    user: User
    team: Team
    user_created: bool
    team_created: bool


async def seed_database(session: AsyncSession, settings: Settings) -> SeedResult:
    cfg = settings.seed
    users = UserRepository(session)
    teams = TeamRepository(session)

    user = await users.get_by_email(cfg.user_email)
    user_created = user is None
    if user is None:
        user = User(email=cfg.user_email.lower())
    user.name = cfg.user_name
    user.password = hash_password(cfg.user_password)
    user.roles = [Role.USER.value, Role.ADMIN.value]
    user.disabled = False
    session.add(user)
    await session.flush()

    team = await teams.get_by_url(cfg.team_url)
    team_created = team is None
    if team is None:
        team = Team(name=cfg.team_name, url=cfg.team_url, owner_user_id=user.id)
        session.add(team)
        await session.flush()

    member = await teams.get_member(team.id, user.id)
    if member is None:
        session.add(TeamMember(team_id=team.id, user_id=user.id, role=TeamMemberRole.ADMIN.value))
    else:
        member.role = TeamMemberRole.ADMIN.value
        session.add(member)

    await session.commit()
    return SeedResult(user=user, team=team, user_created=user_created, team_created=team_created)


async def main() -> None:
    from signflow.core.database import async_session_maker, engine
    from signflow.server.core.config import settings

    try:
        async with async_session_maker() as session:
            result = await seed_database(session, settings)
    finally:
        await engine.dispose()

    logger.info(
        f"Seeded admin user {result.user.email} ({'created' if result.user_created else 'updated'}) "
        f"and team {result.team.url} ({'created' if result.team_created else 'existing'})"
    )


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
