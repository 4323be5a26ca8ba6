"""
Signing-volume leaderboard for the admin dashboard.

One row per active subscription. The volume counts the distinct completed,
non-deleted documents of the subscribing user (personal documents only) plus
those of the subscribing team.
"""

from __future__ import annotations

import logging
from typing import Literal

from sqlalchemy import and_, distinct, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from signflow.core.database.entities import Document, Subscription, Team, User
from signflow.core.database.repositories import QueryBuilder
from signflow.core.models.domain import DocumentStatus, SubscriptionStatus
from signflow.core.models.io import SigningVolumeResponse, SigningVolumeRow

logger = logging.getLogger(__name__)

SortBy = Literal["name", "created_at", "signing_volume"]
SortOrder = Literal["asc", "desc"]


def _search_clause(search: str):
    pattern = f"%{search}%"
    return or_(User.name.ilike(pattern), User.email.ilike(pattern), Team.name.ilike(pattern))


async def get_signing_volume(
    session: AsyncSession,
    search: str = "",
    page: int = 1,
    per_page: int = 10,
    sort_by: SortBy = "signing_volume",
    sort_order: SortOrder = "desc",
) -> SigningVolumeResponse:
    user_docs = aliased(Document)
    team_docs = aliased(Document)

    name = func.coalesce(User.name, Team.name, User.email, literal("Unknown")).label("name")
    volume = (func.count(distinct(user_docs.id)) + func.count(distinct(team_docs.id))).label("signing_volume")

    stmt = (
        select(Subscription.id, Subscription.created_at, Subscription.plan_id, name, volume)
        .select_from(Subscription)
        .outerjoin(User, Subscription.user_id == User.id)
        .outerjoin(Team, Subscription.team_id == Team.id)
        .outerjoin(
            user_docs,
            and_(
                user_docs.user_id == User.id,
                user_docs.status == DocumentStatus.COMPLETED.value,
                user_docs.deleted_at.is_(None),
                user_docs.team_id.is_(None),
            ),
        )
        .outerjoin(
            team_docs,
            and_(
                team_docs.team_id == Team.id,
                team_docs.status == DocumentStatus.COMPLETED.value,
                team_docs.deleted_at.is_(None),
            ),
        )
        .where(Subscription.status == SubscriptionStatus.ACTIVE.value, _search_clause(search))
        .group_by(Subscription.id, Subscription.created_at, Subscription.plan_id, User.name, Team.name, User.email)
    )

    sort_column = {"name": name, "created_at": Subscription.created_at, "signing_volume": volume}.get(sort_by)
    if sort_column is None:
        stmt = stmt.order_by(volume.desc())
    else:
        stmt = stmt.order_by(sort_column.asc() if sort_order == "asc" else sort_column.desc())
    stmt = stmt.order_by(Subscription.id)

    limit, offset = QueryBuilder.page_window(page, per_page)
    rows = (await session.execute(stmt.limit(limit).offset(offset))).all()

    count_stmt = (
        select(func.count())
        .select_from(Subscription)
        .outerjoin(User, Subscription.user_id == User.id)
        .outerjoin(Team, Subscription.team_id == Team.id)
        .where(Subscription.status == SubscriptionStatus.ACTIVE.value, _search_clause(search))
    )
    count = (await session.execute(count_stmt)).scalar_one()
    logger.debug(f"Signing volume: {len(rows)} row(s) of {count} (search={search!r}, page={page})")

    return SigningVolumeResponse(
        leaderboard=[
            SigningVolumeRow(
                id=row.id,
                name=row.name,
                signing_volume=int(row.signing_volume),
                created_at=row.created_at,
                plan_id=row.plan_id,
            )
            for row in rows
        ],
        total_pages=QueryBuilder.total_pages(count, per_page),
    )
