"""Tests for the health and version endpoints."""

from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import OperationalError


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


async def test_health_reports_unreachable_database(client, session):
    failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch.object(session, "execute", AsyncMock(side_effect=failure)):
        r = await client.get("/health")

    assert r.status_code == 503
    assert r.json() == {"status": "degraded", "database": "unavailable"}


async def test_version(client):
    r = await client.get("/version")
    assert r.status_code == 200
    assert r.json() == {"version": "1.0.0", "schema_version": "v1"}


async def test_process_time_header(client):
    r = await client.get("/health")
    assert "x-process-time" in r.headers
