"""Route tests for /api/v1/sign/{token}."""

import json
from typing import List

import httpx
import pytest
from sqlmodel import select

from signflow.core.database.entities import Log
from signflow.core.models.domain import DocumentStatus
from signflow.integrations.laravel import SIGNED_DOCUMENT_STORED_MESSAGE, LaravelClient, TokenCache
from signflow.integrations.resident import ResidentServiceClient
from signflow.server.main import app
from signflow.server.services.deps import get_laravel, get_resident_service


@pytest.fixture
def laravel_requests(client) -> List[httpx.Request]:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"message": SIGNED_DOCUMENT_STORED_MESSAGE, "fileUrl": "https://laravel/x.pdf"})

    laravel = LaravelClient(
        "http://mock-laravel/api",
        "0123456789abcdef",
        token_cache=TokenCache(),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    app.dependency_overrides[get_laravel] = lambda: laravel
    return requests


class TestResident:
    async def test_resident_id(self, client, factory):
        document = await factory.document(await factory.user(), resident_id="r-9")
        recipient = await factory.recipient(document)
        r = await client.get(f"/api/v1/sign/{recipient.token}/resident")
        assert r.status_code == 200
        assert r.json() == {"residentId": "r-9"}

    async def test_unknown_token(self, client):
        r = await client.get("/api/v1/sign/nope/resident")
        assert r.status_code == 404
        assert r.json()["message"] == "Resident not found"

    async def test_resident_details(self, client, factory):
        document = await factory.document(await factory.user(), resident_id="r-9")
        recipient = await factory.recipient(document)
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"firstName": "Ada"}})

        resident_client = ResidentServiceClient(
            "http://mock-cd/api", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )
        app.dependency_overrides[get_resident_service] = lambda: resident_client

        r = await client.get(f"/api/v1/sign/{recipient.token}/resident/details")
        assert r.status_code == 200
        assert r.json() == {"firstName": "Ada"}
        assert seen[0].url.path == "/api/v1/residents/forms/resident/r-9"


class TestComplete:
    async def test_last_signer_completes_and_hands_off(self, client, factory, notify_outbox, laravel_requests):
        document = await factory.document(await factory.user(), resident_id="r-9")
        recipient = await factory.recipient(document)

        r = await client.post(
            f"/api/v1/sign/{recipient.token}/complete",
            json={"documentId": document.id, "fileUrl": "https://files.example.com/signed.pdf"},
        )

        assert r.status_code == 200
        body = r.json()
        assert body["status"] == DocumentStatus.COMPLETED.value
        assert body["documentUrl"] == "https://laravel/x.pdf"
        assert json.loads(laravel_requests[0].content)["recipient"] == "AllRecipientsSigned"
        assert "signer@example.com" in notify_outbox.to()

    async def test_without_file_url_laravel_is_not_called(self, client, factory, laravel_requests):
        document = await factory.document(await factory.user())
        recipient = await factory.recipient(document)
        r = await client.post(f"/api/v1/sign/{recipient.token}/complete", json={"documentId": document.id})
        assert r.status_code == 200
        assert laravel_requests == []

    async def test_draft_document(self, client, factory, laravel_requests):
        document = await factory.document(await factory.user(), status=DocumentStatus.DRAFT)
        recipient = await factory.recipient(document)
        r = await client.post(f"/api/v1/sign/{recipient.token}/complete", json={"documentId": document.id})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_REQUEST"

    async def test_laravel_failure_still_completes(self, client, factory, session, notify_outbox):
        laravel = LaravelClient(
            "http://mock-laravel/api",
            "0123456789abcdef",
            token_cache=TokenCache(),
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500))),
        )
        app.dependency_overrides[get_laravel] = lambda: laravel
        document = await factory.document(await factory.user())
        recipient = await factory.recipient(document)

        r = await client.post(
            f"/api/v1/sign/{recipient.token}/complete",
            json={"documentId": document.id, "fileUrl": "https://files.example.com/signed.pdf"},
        )

        assert r.status_code == 200
        assert r.json()["status"] == DocumentStatus.COMPLETED.value
        assert "signer@example.com" in notify_outbox.to()
        actions = (await session.execute(select(Log.action))).scalars().all()
        assert "LARAVEL_SUBMISSION_ERROR" in actions

    async def test_invalid_file_url(self, client, factory, laravel_requests):
        document = await factory.document(await factory.user())
        recipient = await factory.recipient(document)

        r = await client.post(
            f"/api/v1/sign/{recipient.token}/complete", json={"documentId": document.id, "fileUrl": "not-a-url"}
        )

        assert r.status_code == 422
        assert laravel_requests == []


class TestReject:
    async def test_reject_with_reason(self, client, factory, notify_outbox):
        document = await factory.document(await factory.user())
        recipient = await factory.recipient(document)

        r = await client.post(
            f"/api/v1/sign/{recipient.token}/reject",
            json={"documentId": document.id, "reason": "Wrong resident"},
        )

        assert r.status_code == 200
        assert r.json()["status"] == DocumentStatus.REJECTED.value
        assert notify_outbox.to() == ["signer@example.com", "owner@example.com"]

    async def test_unknown_token(self, client, factory):
        document = await factory.document(await factory.user())
        r = await client.post("/api/v1/sign/nope/reject", json={"documentId": document.id})
        assert r.status_code == 404

    async def test_reason_too_long(self, client, factory):
        document = await factory.document(await factory.user())
        recipient = await factory.recipient(document)
        r = await client.post(
            f"/api/v1/sign/{recipient.token}/reject", json={"documentId": document.id, "reason": "x" * 501}
        )
        assert r.status_code == 422
