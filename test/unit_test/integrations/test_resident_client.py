"""Unit tests for the resident-information service client."""

import json

import httpx
import pytest

from signflow.integrations.resident import ResidentServiceClient, ResidentServiceError

BASE_URL = "http://mock-cd/api"


def make_client(handler, **kwargs) -> ResidentServiceClient:
    kwargs.setdefault("backoff_initial", 0)
    return ResidentServiceClient(
        BASE_URL, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)), **kwargs
    )


class TestGetResident:
    async def test_unwraps_data(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"firstName": "Ada"}})

        assert await make_client(handler).get_resident("r-1") == {"firstName": "Ada"}
        assert seen[0].url.path == "/api/v1/residents/forms/resident/r-1"
        assert "x-api-key" not in seen[0].headers

    async def test_requires_id(self):
        with pytest.raises(ResidentServiceError, match="resident_id is required"):
            await make_client(lambda request: httpx.Response(200)).get_resident("  ")

    async def test_client_error_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(404, text="missing")

        with pytest.raises(ResidentServiceError) as exc_info:
            await make_client(handler, max_retries=3).get_resident("r-1")
        assert exc_info.value.status_code == 404
        assert len(calls) == 1

    async def test_server_error_is_retried(self):
        responses = [httpx.Response(503), httpx.Response(502), httpx.Response(200, json={"data": {"id": 1}})]
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return responses[len(calls) - 1]

        assert await make_client(handler, max_retries=2).get_resident("r-1") == {"id": 1}
        assert len(calls) == 3

    async def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(ResidentServiceError) as exc_info:
            await make_client(handler, max_retries=1).get_resident("r-1")
        assert exc_info.value.status_code == 500
        assert len(calls) == 2

    async def test_transport_errors_are_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"data": {}})

        assert await make_client(handler, max_retries=1).get_resident("r-1") == {}
        assert len(calls) == 2

    async def test_non_json_body_raises_service_error(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(ResidentServiceError, match="invalid response") as exc_info:
            await make_client(handler, max_retries=2).get_resident("r-1")
        assert exc_info.value.status_code == 200
        assert exc_info.value.details == "<html>maintenance</html>"
        assert len(calls) == 1


class TestTemplateCalls:
    async def test_default_config(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"fields": []})

        assert await make_client(handler).get_default_form_config("ext-1") == {"fields": []}
        assert seen[0].url.path == "/api/v1/forms/default-config-form/ext-1"

    async def test_update_settings_sends_api_key(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = make_client(handler, api_key="secret")
        await client.update_form_template_settings("ext-1", {"defaultLanguage": "en"})

        request = seen[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/v1/forms/templates/ext-1/settings"
        assert request.headers["x-api-key"] == "secret"
        assert json.loads(request.content) == {"defaultLanguage": "en"}

    async def test_set_template_signers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        signers = [{"email": "a@example.com", "name": "A", "role": "SIGNER", "signingOrder": 1}]
        await make_client(handler, api_key="secret").set_template_signers("ext-1", signers)
        assert seen[0].url.path == "/api/v1/forms/templates/ext-1/signers"
        assert json.loads(seen[0].content) == signers
