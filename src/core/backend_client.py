"""
Remote backend client setup with lazy initialization.

Every call forwards the caller's bearer token; failures surface as
BackendError carrying a user-facing message.
"""

from typing import Any

import httpx

from core.config import BACKEND_TIMEOUT_SECONDS, BACKEND_URL

_http_client: httpx.AsyncClient | None = None


class BackendError(Exception):
    """A failed backend call, with the message to show the user."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared HTTP client (lazy initialization)."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            base_url=BACKEND_URL,
            timeout=BACKEND_TIMEOUT_SECONDS,
        )
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def _clean_params(params: dict[str, Any] | None) -> dict[str, str]:
    """Drop empty values and render booleans the way the backend parses them."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def _safe_json(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {"data": payload}


class BackendClient:
    """Thin authenticated wrapper around the backend's JSON endpoints."""

    def __init__(self, http: httpx.AsyncClient, access_token: str):
        self._http = http
        self._access_token = access_token

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        default_error: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict:
        """
        Issue one request and return the decoded JSON body.

        Raises:
            BackendError: on transport failure or a non-2xx response; the
                message is the backend's 'error' field when it sends one.
        """
        try:
            response = await self._http.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise BackendError(f"{default_error}: {e}", status_code=502) from e

        payload = _safe_json(response)
        if response.is_error:
            message = payload.get("error")
            if not isinstance(message, str) or not message:
                message = default_error
            raise BackendError(message, status_code=response.status_code)
        return payload

    async def get(self, path: str, *, default_error: str, params: dict[str, Any] | None = None) -> dict:
        return await self.request("GET", path, params=params, default_error=default_error)

    async def post(self, path: str, *, default_error: str, json: dict[str, Any] | None = None) -> dict:
        return await self.request("POST", path, json=json or {}, default_error=default_error)

    async def patch(self, path: str, *, default_error: str, json: dict[str, Any] | None = None) -> dict:
        return await self.request("PATCH", path, json=json or {}, default_error=default_error)

    async def delete(self, path: str, *, default_error: str) -> dict:
        return await self.request("DELETE", path, default_error=default_error)
