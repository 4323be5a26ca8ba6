"""Unit tests for database helpers and the month_trunc construct."""

from datetime import datetime

from sqlalchemy import column, select
from sqlalchemy.dialects import postgresql, sqlite

from signflow.core.database import create_engine, month_trunc, utc_now
from signflow.core.database.entities import User


class TestCreateEngine:
    def test_postgres_urls_use_asyncpg(self):
        for url in (
            "postgres://u:p@db:5432/app",
            "postgresql://u:p@db:5432/app",
            "postgresql+psycopg2://u:p@db:5432/app",
        ):
            engine = create_engine(url)
            assert engine.url.drivername == "postgresql+asyncpg"

    def test_other_urls_untouched(self):
        engine = create_engine("sqlite+aiosqlite:///:memory:")
        assert engine.url.drivername == "sqlite+aiosqlite"


class TestMonthTrunc:
    def test_compiles_to_date_trunc_on_postgres(self):
        sql = str(select(month_trunc(column("created_at"))).compile(dialect=postgresql.dialect()))
        assert "date_trunc('month', created_at)" in sql

    def test_compiles_to_strftime_on_sqlite(self):
        sql = str(select(month_trunc(column("created_at"))).compile(dialect=sqlite.dialect()))
        assert "strftime('%Y-%m-01 00:00:00', created_at)" in sql

    async def test_buckets_rows_on_sqlite(self, session, factory):
        await factory.user(email="a@example.com", created_at=datetime(2026, 3, 17, 9, 30))
        row = (await session.execute(select(month_trunc(User.created_at).label("month")))).one()
        month = row.month if isinstance(row.month, datetime) else datetime.fromisoformat(row.month)
        assert month == datetime(2026, 3, 1)


class TestTimestamps:
    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None

    async def test_stored_timestamps_compare_with_utc_now(self, session, factory):
        user = await factory.user()
        await session.refresh(user)
        assert user.created_at.tzinfo is None
        assert user.created_at <= utc_now()
