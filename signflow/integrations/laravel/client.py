from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .crypto import encrypt_for_laravel, generate_laravel_token
from .errors import LaravelApiError, LaravelAuthError, LaravelConfigurationError
from .token_cache import TokenCache, backend_token_cache

SIGNED_DOCUMENT_STORED_MESSAGE = "Signed document stored successfully"


class LaravelClient:
    """
    HTTP client for the Laravel backend.

    Responsibilities:
    - authenticate: exchange the encrypted service credentials for an access token
    - get_token: cached access token, logging in on a miss
    - fetch_with_auth: bearer-authenticated JSON request
    - post_signed_document: hand a signed PDF's location over to the backend
    """

    def __init__(
        self,
        api_url: Optional[str],
        encryption_key: Optional[str],
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token_cache: Optional[TokenCache] = None,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/") if api_url else None
        self.encryption_key = encryption_key
        self.username = username
        self.password = password
        self.token_cache = token_cache if token_cache is not None else backend_token_cache
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def _json_headers() -> dict[str, str]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def _url(self, path: str) -> str:
        if not self.api_url:
            raise LaravelConfigurationError("LARAVEL_API_URL is not defined")
        return f"{self.api_url}/{path.lstrip('/')}"

    async def authenticate(self) -> str:
        url = self._url("/auth/login")
        encrypted = encrypt_for_laravel({"username": self.username, "password": self.password}, self.encryption_key)
        try:
            self._logger.debug("LaravelClient.authenticate: POST %s", url)
            r = await self._client.post(url, headers=self._json_headers(), json={"data": encrypted})
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LaravelAuthError(
                "Error during Laravel authentication",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise LaravelAuthError(f"Error during Laravel authentication: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise LaravelAuthError("Laravel returned a non-JSON response", status_code=r.status_code, details=r.text) from e
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise LaravelAuthError("Laravel did not return a token.", status_code=r.status_code, details=data)
        self._logger.debug("LaravelClient.authenticate: token issued")
        return token

    async def get_token(self) -> str:
        return await self.token_cache.get_or_fetch(self.authenticate)

    async def fetch_with_auth(
        self,
        url: str,
        *,
        token: Optional[str],
        method: str = "GET",
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        if not token:
            raise LaravelAuthError("Token not provided for authentication.")

        merged = {**self._json_headers(), "Authorization": f"Bearer {token}", **(headers or {})}
        try:
            self._logger.debug("LaravelClient.fetch_with_auth: %s %s", method, url)
            r = await self._client.request(method, url, headers=merged, json=json)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "LaravelClient.fetch_with_auth: %s %s failed: %s", method, url, e.response.text
            )
            raise LaravelApiError(
                f"Request error: {e.response.status_code} - {e.response.reason_phrase}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise LaravelApiError(f"Request error: {e}") from e
        return r.json()

    async def post_signed_document(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST the signed-document record; the backend must confirm storage explicitly."""
        url = self._url("/store-signed-document")
        headers = {**self._json_headers(), "X-TOKEN": generate_laravel_token(self.encryption_key)}
        try:
            self._logger.debug(
                "LaravelClient.post_signed_document: POST %s documensoId=%s", url, payload.get("documensoId")
            )
            r = await self._client.post(url, headers=headers, json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LaravelApiError(
                "Laravel rejected the request",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise LaravelApiError(f"Laravel request failed: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise LaravelApiError("Laravel returned a non-JSON response", status_code=r.status_code, details=r.text) from e
        if not isinstance(data, dict) or data.get("message") != SIGNED_DOCUMENT_STORED_MESSAGE:
            raise LaravelApiError("Laravel rejected the request", status_code=r.status_code, details=data)
        return data

    async def aclose(self) -> None:
        await self._client.aclose()


def get_laravel_client() -> LaravelClient:
    """Build a client from the ``LARAVEL_*`` settings, sharing the process token cache."""
    from signflow.server.core.config import settings

    cfg = settings.laravel
    backend_token_cache.ttl_seconds = cfg.token_ttl_seconds
    return LaravelClient(
        cfg.api_url,
        cfg.encryption_key,
        username=cfg.username,
        password=cfg.password,
    )
