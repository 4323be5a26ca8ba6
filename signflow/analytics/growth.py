"""
Monthly growth charts.

Every query buckets rows by calendar month with ``month_trunc`` and computes
both the per-month count and a running total
(``SUM(COUNT(..)) OVER (ORDER BY month)``). Rows are read newest first, capped
where noted, and reversed so charts read left to right in time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Literal, Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.core.database import month_trunc
from signflow.core.database.entities import Document, Recipient, User
from signflow.core.models.domain import DocumentStatus
from signflow.core.models.io import ChartData, ChartDataset

logger = logging.getLogger(__name__)

ChartType = Literal["count", "cumulative"]

MONTH_LABEL_FORMAT = "%b %Y"


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def _chart(rows: Sequence[Any], type: ChartType, count_label: str, cumulative_label: str) -> ChartData:
    ordered = list(reversed(rows))
    values = [int(row.count) if type == "count" else int(row.cume_count) for row in ordered]
    return ChartData(
        labels=[_as_datetime(row.month).strftime(MONTH_LABEL_FORMAT) for row in ordered],
        datasets=[ChartDataset(label=count_label if type == "count" else cumulative_label, data=values)],
    )


def _monthly(bucket_column, counted, *, limit: int | None = 12):
    month = month_trunc(bucket_column)
    stmt = (
        select(
            month.label("month"),
            counted.label("count"),
            func.sum(counted).over(order_by=month).label("cume_count"),
        )
        .group_by(month)
        .order_by(month.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


async def get_completed_documents_monthly(session: AsyncSession, type: ChartType = "count") -> ChartData:
    stmt = _monthly(Document.updated_at, func.count(Document.id)).where(
        Document.status == DocumentStatus.COMPLETED.value
    )
    rows = (await session.execute(stmt)).all()
    return _chart(rows, type, "Completed Documents per Month", "Total Completed Documents")


async def get_user_monthly_growth(session: AsyncSession, type: ChartType = "count") -> ChartData:
    rows = (await session.execute(_monthly(User.created_at, func.count(User.id)))).all()
    return _chart(rows, type, "New Users", "Total Users")


def _signer_conversion_query():
    """Signers who signed a document before creating an account, bucketed by sign-up month."""
    return (
        _monthly(User.created_at, func.count(distinct(Recipient.email)), limit=None)
        .select_from(Recipient)
        .join(User, Recipient.email == User.email)
        .where(Recipient.signed_at.is_not(None), Recipient.signed_at < User.created_at)
    )


async def get_signer_conversion_monthly(session: AsyncSession, type: ChartType = "count") -> ChartData:
    rows = (await session.execute(_signer_conversion_query())).all()
    return _chart(rows, type, "Signers That Signed Up", "Total Signers That Signed Up")


async def get_signer_conversion(session: AsyncSession) -> List[Dict[str, Any]]:
    """Admin view of signer conversion: ``{month: "YYYY-MM", count, cume_count}`` rows, newest first."""
    rows = (await session.execute(_signer_conversion_query())).all()
    logger.debug(f"Signer conversion: {len(rows)} month(s)")
    return [
        {
            "month": _as_datetime(row.month).strftime("%Y-%m"),
            "count": int(row.count),
            "cume_count": int(row.cume_count),
        }
        for row in rows
    ]
