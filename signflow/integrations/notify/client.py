from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import NotifyConfigurationError


@dataclass(frozen=True)
class EmailRecipient:
    email: str
    name: Optional[str] = None


@dataclass(frozen=True)
class SendEmailResult:
    success: bool
    message: str


class NotifyClient:
    """
    Thin HTTP client for the Notify e-mail delivery service.

    Responsibilities:
    - send_email: deliver one HTML message immediately

    Delivery problems never raise; they are logged and reported through
    ``SendEmailResult`` so a failed notification cannot abort the operation
    that triggered it.
    """

    def __init__(
        self,
        endpoint: Optional[str],
        login: Optional[str],
        password: Optional[str],
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint = endpoint
        self.login = login
        self.password = password
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def _require_credentials(self) -> None:
        if not self.endpoint or not self.login or not self.password:
            raise NotifyConfigurationError("Notify credentials are not configured")

    async def send_email(self, to: EmailRecipient, subject: str, html: str) -> SendEmailResult:
        try:
            self._require_credentials()
            url = f"{self.endpoint}sendImmediateEmailNotification"
            self._logger.debug("NotifyClient.send_email: POST %s to=%s subject=%r", url, to.email, subject)
            r = await self._client.post(
                url,
                params={"login": self.login, "password": self.password},
                headers={"Content-Type": "application/json"},
                json={"mailTo": to.email, "subject": subject, "richContent": html},
            )
            r.raise_for_status()
        except NotifyConfigurationError as e:
            self._logger.error("NotifyClient.send_email: %s", e)
            return SendEmailResult(success=False, message=str(e))
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "NotifyClient.send_email: delivery to %s failed with %s", to.email, e.response.status_code
            )
            return SendEmailResult(
                success=False,
                message=f"Error sending email: {e.response.status_code} {e.response.reason_phrase}",
            )
        except httpx.HTTPError as e:
            self._logger.error("NotifyClient.send_email: transport error for %s: %s", to.email, e, exc_info=True)
            return SendEmailResult(success=False, message=f"Error sending email: {e}")

        self._logger.debug("NotifyClient.send_email: delivered to %s", to.email)
        return SendEmailResult(success=True, message="Email sent successfully")

    async def aclose(self) -> None:
        await self._client.aclose()


def get_notify_client() -> NotifyClient:
    """Build a client from the ``NOTIFY_*`` settings."""
    from signflow.server.core.config import settings

    cfg = settings.notify
    return NotifyClient(cfg.endpoint, cfg.email, cfg.password)
