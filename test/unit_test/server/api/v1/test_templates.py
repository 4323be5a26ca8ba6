"""Route tests for /api/v1/templates."""

import json
from typing import List

import httpx
import pytest

from signflow.integrations.resident import ResidentServiceClient
from signflow.server.main import app
from signflow.server.services.deps import get_resident_service


class ResidentServiceStub:
    """Records requests made to the mock resident service."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/default-config-form/ext-1"):
            return httpx.Response(200, json={"fields": ["residentName"]})
        return httpx.Response(200, json={"ok": True})


@pytest.fixture
def resident_service(client):
    stub = ResidentServiceStub()
    resident_client = ResidentServiceClient(
        "http://mock-cd/api",
        api_key="cd-key",
        backoff_initial=0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(stub.handler)),
    )
    app.dependency_overrides[get_resident_service] = lambda: resident_client
    return stub


class TestTemplateCrud:
    async def test_create_list_get_delete(self, client, factory, owner):
        data = await factory.document_data()
        r = await client.post(
            "/api/v1/templates",
            headers=owner.headers,
            json={"title": "Intake", "templateDocumentDataId": data.id, "formKey": "intake"},
        )
        assert r.status_code == 200
        template_id = r.json()["id"]

        listing = (await client.get("/api/v1/templates", headers=owner.headers)).json()
        assert [t["title"] for t in listing["templates"]] == ["Intake"]
        assert listing["totalPages"] == 1

        detail = (await client.get(f"/api/v1/templates/{template_id}", headers=owner.headers)).json()
        assert detail["formKey"] == "intake"
        assert detail["recipients"] == []

        r = await client.delete(f"/api/v1/templates/{template_id}", headers=owner.headers)
        assert r.status_code == 200
        r = await client.get(f"/api/v1/templates/{template_id}", headers=owner.headers)
        assert r.status_code == 404

    async def test_requires_token(self, client):
        assert (await client.get("/api/v1/templates")).status_code == 401


class TestPublicLookups:
    async def test_direct_link_is_public(self, client, factory):
        owner = await factory.user()
        template = await factory.template(owner)
        placeholder = await factory.recipient(template=template)
        link = await factory.direct_link(template, placeholder)

        r = await client.get(f"/api/v1/templates/direct/{link.token}")
        assert r.status_code == 200
        body = r.json()
        assert body["directLink"]["token"] == link.token
        assert body["directLink"]["directTemplateRecipientId"] == placeholder.id

    async def test_external_lookup(self, client, factory, owner):
        await factory.template(owner.user, external_id="ext-1")
        r = await client.get("/api/v1/templates/external/ext-1", headers=owner.headers)
        assert r.json()["user"]["email"] == owner.user.email

    async def test_default_config(self, client, owner, resident_service):
        r = await client.get("/api/v1/templates/external/ext-1/default-config", headers=owner.headers)
        assert r.status_code == 200
        assert r.json() == {"fields": ["residentName"]}


class TestExternalUpdate:
    async def test_pushes_meta_defaults(self, client, factory, owner, resident_service):
        await factory.template(owner.user, external_id="ext-1")
        r = await client.patch(
            "/api/v1/templates/external/ext-1",
            headers=owner.headers,
            json={"data": {"title": "Renamed"}, "meta": {"subject": "Sign", "language": "fr"}},
        )
        assert r.status_code == 200
        assert r.json()["title"] == "Renamed"

        request = resident_service.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/v1/forms/templates/ext-1/settings"
        assert request.headers["x-api-key"] == "cd-key"
        assert json.loads(request.content) == {"defaultLanguage": "fr", "defaultEmailSubject": "Sign"}

    async def test_without_meta_nothing_is_pushed(self, client, factory, owner, resident_service):
        await factory.template(owner.user, external_id="ext-1")
        r = await client.patch(
            "/api/v1/templates/external/ext-1", headers=owner.headers, json={"data": {"title": "Renamed"}}
        )
        assert r.status_code == 200
        assert resident_service.requests == []

    async def test_upstream_failure_is_bad_gateway(self, client, factory, owner):
        await factory.template(owner.user, external_id="ext-1")
        failing = ResidentServiceClient(
            "http://mock-cd/api",
            max_retries=0,
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(400))),
        )
        app.dependency_overrides[get_resident_service] = lambda: failing
        r = await client.patch(
            "/api/v1/templates/external/ext-1", headers=owner.headers, json={"meta": {"subject": "Sign"}}
        )
        assert r.status_code == 502
        assert r.json()["code"] == "UPSTREAM_ERROR"


class TestTemplateRecipients:
    async def test_set_recipients_syncs_signers(self, client, factory, owner, resident_service):
        template = await factory.template(owner.user, external_id="ext-1")
        r = await client.put(
            f"/api/v1/templates/{template.id}/recipients",
            headers=owner.headers,
            json={"recipients": [{"email": "recipient.1@example.com", "name": "Resident", "signingOrder": 1}]},
        )
        assert r.status_code == 200
        recipient = r.json()[0]
        assert recipient["email"] == "recipient.1@example.com"

        request = resident_service.requests[0]
        assert request.url.path == "/api/v1/forms/templates/ext-1/signers"
        assert json.loads(request.content) == [
            {
                "email": "recipient.1@example.com",
                "name": "Resident",
                "role": "SIGNER",
                "signingOrder": 1,
                "documensoSignerId": recipient["id"],
            }
        ]

    async def test_internal_template_is_not_synced(self, client, factory, owner, resident_service):
        template = await factory.template(owner.user)
        r = await client.put(
            f"/api/v1/templates/{template.id}/recipients",
            headers=owner.headers,
            json={"recipients": [{"email": "a@example.com"}]},
        )
        assert r.status_code == 200
        assert resident_service.requests == []


class TestGenerateDocument:
    async def test_generates_document_with_signing_urls(self, client, factory, owner):
        template = await factory.template(owner.user)
        placeholder = await factory.recipient(template=template, email="recipient.1@example.com", signing_order=1)
        await factory.field(placeholder, template=template)

        r = await client.post(
            f"/api/v1/templates/{template.id}/generate-document",
            headers=owner.headers,
            json={
                "title": "Admission - Jane",
                "recipients": [{"id": placeholder.id, "email": "jane@example.com", "name": "Jane", "signingOrder": 1}],
                "meta": {"subject": "Please sign"},
                "residentId": "r-5",
            },
        )
        assert r.status_code == 200
        body = r.json()
        assert body["title"] == "Admission - Jane"
        assert body["status"] == "DRAFT"
        assert [x["email"] for x in body["recipients"]] == ["jane@example.com"]
        assert body["recipients"][0]["signingUrl"].startswith("http://localhost:3000/sign/")

    async def test_template_without_placeholders(self, client, factory, owner):
        template = await factory.template(owner.user)
        r = await client.post(
            f"/api/v1/templates/{template.id}/generate-document", headers=owner.headers, json={"recipients": []}
        )
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_BODY"
