"""Unit tests for the Notify e-mail transport."""

import json

import httpx

from signflow.integrations.notify import EmailRecipient, NotifyClient


def make_client(handler, endpoint="http://mock-notify/api/", login="login", password="pw") -> NotifyClient:
    return NotifyClient(
        endpoint, login, password, client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


class TestSendEmail:
    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_client(handler)
        result = await client.send_email(EmailRecipient("jane@example.com", "Jane"), "Hello", "<p>Hi</p>")

        assert result.success
        assert result.message == "Email sent successfully"
        request = seen[0]
        assert request.url.path == "/api/sendImmediateEmailNotification"
        assert request.url.params["login"] == "login"
        assert request.url.params["password"] == "pw"
        assert json.loads(request.content) == {
            "mailTo": "jane@example.com",
            "subject": "Hello",
            "richContent": "<p>Hi</p>",
        }

    async def test_http_error_is_reported_not_raised(self):
        client = make_client(lambda request: httpx.Response(503))
        result = await client.send_email(EmailRecipient("jane@example.com"), "Hello", "<p>Hi</p>")
        assert not result.success
        assert "503" in result.message

    async def test_transport_error_is_reported(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = await make_client(handler).send_email(EmailRecipient("jane@example.com"), "Hello", "x")
        assert not result.success
        assert "refused" in result.message

    async def test_missing_credentials(self):
        calls = []
        client = make_client(lambda request: calls.append(request) or httpx.Response(200), password=None)
        result = await client.send_email(EmailRecipient("jane@example.com"), "Hello", "x")
        assert not result.success
        assert calls == []
