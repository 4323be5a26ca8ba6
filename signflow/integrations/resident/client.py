from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import ResidentServiceError


class ResidentServiceClient:
    """
    Async client for the resident-information (CD) service.

    Responsibilities:
    - get_resident: resident profile used to prefill signing forms
    - get_default_form_config: default configuration for a form template
    - update_form_template_settings / set_template_signers: push template changes back

    Client errors (4xx) are returned to the caller straight away. Server errors
    and transport failures are retried up to ``max_retries`` times with
    exponential backoff.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        max_retries: int = 2,
        backoff_initial: float = 0.5,
        backoff_factor: float = 2.0,
        backoff_max: float = 8.0,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._max_retries = max(0, max_retries)
        self._backoff_initial = backoff_initial
        self._backoff_factor = backoff_factor
        self._backoff_max = backoff_max
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def _headers(self, *, with_api_key: bool = False) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if with_api_key and self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    @staticmethod
    def _require_id(value: Optional[str], name: str) -> str:
        if value is None or not str(value).strip():
            raise ResidentServiceError(f"{name} is required")
        return str(value)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        with_api_key: bool = False,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        retries = 0
        while True:
            try:
                self._logger.debug("ResidentServiceClient: %s %s", method, url)
                r = await self._client.request(method, url, headers=self._headers(with_api_key=with_api_key), json=json)
                r.raise_for_status()
                try:
                    return r.json()
                except ValueError as e:
                    self._logger.error("ResidentServiceClient: %s %s returned a non-JSON body", method, url)
                    raise ResidentServiceError(
                        "Resident service returned an invalid response",
                        status_code=r.status_code,
                        details=r.text,
                    ) from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status < 500 or retries >= self._max_retries:
                    self._logger.error("ResidentServiceClient: %s %s failed with %s", method, url, status)
                    raise ResidentServiceError(
                        f"Resident service request failed: {status} - {e.response.reason_phrase}",
                        status_code=status,
                        details=e.response.text,
                    ) from e
                reason = f"status {status}"
            except httpx.TransportError as e:
                if retries >= self._max_retries:
                    self._logger.error("ResidentServiceClient: %s %s failed", method, url, exc_info=True)
                    raise ResidentServiceError(f"Resident service unreachable: {e}") from e
                reason = type(e).__name__

            sleep_s = min(self._backoff_initial * (self._backoff_factor**retries), self._backoff_max)
            self._logger.warning(
                "ResidentServiceClient: %s %s got %s; retrying in %ss (attempt %s/%s)",
                method,
                url,
                reason,
                sleep_s,
                retries + 1,
                self._max_retries,
            )
            retries += 1
            await asyncio.sleep(sleep_s)

    async def get_resident(self, resident_id: Optional[str]) -> Dict[str, Any]:
        rid = self._require_id(resident_id, "resident_id")
        body = await self._request("GET", f"/v1/residents/forms/resident/{rid}")
        return body.get("data") if isinstance(body, dict) else body

    async def get_default_form_config(self, template_id: Optional[str]) -> Any:
        tid = self._require_id(template_id, "template_id")
        return await self._request("GET", f"/v1/forms/default-config-form/{tid}")

    async def update_form_template_settings(self, external_id: Optional[str], payload: Dict[str, Any]) -> Any:
        eid = self._require_id(external_id, "external_id")
        return await self._request("PATCH", f"/v1/forms/templates/{eid}/settings", json=payload, with_api_key=True)

    async def set_template_signers(self, external_id: Optional[str], signers: List[Dict[str, Any]]) -> Any:
        eid = self._require_id(external_id, "external_id")
        return await self._request("PATCH", f"/v1/forms/templates/{eid}/signers", json=signers, with_api_key=True)

    async def aclose(self) -> None:
        await self._client.aclose()


def get_resident_client() -> ResidentServiceClient:
    from signflow.server.core.config import settings

    cfg = settings.resident_service
    return ResidentServiceClient(cfg.url, api_key=cfg.api_key, max_retries=cfg.max_retries)
