"""Unit tests for the monthly growth charts, run against SQLite."""

from datetime import datetime

from signflow.analytics.growth import (
    get_completed_documents_monthly,
    get_signer_conversion,
    get_signer_conversion_monthly,
    get_user_monthly_growth,
)
from signflow.core.models.domain import DocumentStatus, SigningStatus

JAN = datetime(2026, 1, 15, 9, 30)
FEB = datetime(2026, 2, 3, 12, 0)
MAR = datetime(2026, 3, 20, 18, 45)


class TestCompletedDocuments:
    async def test_counts_completed_documents_per_month(self, session, factory):
        owner = await factory.user()
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=JAN)
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=JAN)
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=MAR)
        await factory.document(owner, status=DocumentStatus.PENDING, updated_at=FEB)

        chart = await get_completed_documents_monthly(session, "count")
        assert chart.labels == ["Jan 2026", "Mar 2026"]
        assert chart.datasets[0].label == "Completed Documents per Month"
        assert chart.datasets[0].data == [2, 1]

    async def test_cumulative(self, session, factory):
        owner = await factory.user()
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=JAN)
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=FEB)
        await factory.document(owner, status=DocumentStatus.COMPLETED, updated_at=FEB)

        chart = await get_completed_documents_monthly(session, "cumulative")
        assert chart.datasets[0].label == "Total Completed Documents"
        assert chart.datasets[0].data == [1, 3]

    async def test_empty(self, session):
        chart = await get_completed_documents_monthly(session)
        assert chart.labels == []
        assert chart.datasets[0].data == []


class TestUserGrowth:
    async def test_new_and_total_users(self, session, factory):
        await factory.user(email="a@example.com", created_at=JAN)
        await factory.user(email="b@example.com", created_at=JAN)
        await factory.user(email="c@example.com", created_at=MAR)

        count = await get_user_monthly_growth(session, "count")
        total = await get_user_monthly_growth(session, "cumulative")

        assert count.labels == total.labels == ["Jan 2026", "Mar 2026"]
        assert (count.datasets[0].label, count.datasets[0].data) == ("New Users", [2, 1])
        assert (total.datasets[0].label, total.datasets[0].data) == ("Total Users", [2, 3])


class TestSignerConversion:
    async def _seed(self, factory):
        owner = await factory.user(created_at=JAN)
        document = await factory.document(owner)
        # signed first, registered later: a conversion
        await factory.recipient(
            document, email="convert@example.com", signing_status=SigningStatus.SIGNED.value, signed_at=JAN
        )
        await factory.user(email="convert@example.com", created_at=FEB)
        # already registered when signing: not a conversion
        await factory.recipient(
            document, email="owner@example.com", signing_status=SigningStatus.SIGNED.value, signed_at=MAR
        )
        # never registered
        await factory.recipient(
            document, email="guest@example.com", signing_status=SigningStatus.SIGNED.value, signed_at=JAN
        )

    async def test_chart(self, session, factory):
        await self._seed(factory)
        chart = await get_signer_conversion_monthly(session, "count")
        assert chart.labels == ["Feb 2026"]
        assert chart.datasets[0].label == "Signers That Signed Up"
        assert chart.datasets[0].data == [1]

        cumulative = await get_signer_conversion_monthly(session, "cumulative")
        assert cumulative.datasets[0].label == "Total Signers That Signed Up"

    async def test_admin_rows(self, session, factory):
        await self._seed(factory)
        assert await get_signer_conversion(session) == [{"month": "2026-02", "count": 1, "cume_count": 1}]
