"""Unit tests for the authenticated backend client."""

import asyncio

import httpx
import pytest

from core import backend_client
from core.backend_client import BackendClient, BackendError


def _client(handler) -> BackendClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://backend.test")
    return BackendClient(http, "secret-token")


class TestBackendClient:
    def test_get_sends_token_and_clean_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"events": [], "count": 0})

        payload = asyncio.run(
            _client(handler).get(
                "/api/calendar/events",
                params={"assigned": "all", "sourceId": None, "q": "", "includeIgnored": False, "limit": 50},
                default_error="Failed",
            )
        )

        request = seen["request"]
        assert payload == {"events": [], "count": 0}
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Accept"] == "application/json"
        assert dict(request.url.params) == {"assigned": "all", "includeIgnored": "false", "limit": "50"}

    def test_post_sends_json_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content
            return httpx.Response(201, json={"event": {"id": "e1"}})

        payload = asyncio.run(_client(handler).post("/api/calendar/events", json={"summary": "Call"}, default_error="x"))

        assert payload == {"event": {"id": "e1"}}
        assert b'"summary"' in seen["body"]

    def test_error_uses_backend_message(self):
        def handler(request):
            return httpx.Response(403, json={"error": "Forbidden for this project"})

        with pytest.raises(BackendError) as exc_info:
            asyncio.run(_client(handler).get("/api/projects", default_error="Failed to fetch projects"))

        assert exc_info.value.message == "Forbidden for this project"
        assert exc_info.value.status_code == 403

    def test_error_without_body_uses_default_message(self):
        def handler(request):
            return httpx.Response(500, text="<html>oops</html>")

        with pytest.raises(BackendError) as exc_info:
            asyncio.run(_client(handler).get("/api/projects", default_error="Failed to fetch projects"))

        assert exc_info.value.message == "Failed to fetch projects"
        assert exc_info.value.status_code == 500

    def test_transport_failure_becomes_bad_gateway(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BackendError) as exc_info:
            asyncio.run(_client(handler).get("/api/emails", default_error="Failed to fetch emails"))

        assert exc_info.value.status_code == 502
        assert exc_info.value.message.startswith("Failed to fetch emails")

    def test_non_object_json_is_wrapped(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2, 3])

        payload = asyncio.run(_client(handler).get("/api/things", default_error="x"))

        assert payload == {"data": [1, 2, 3]}


class TestSharedHttpClient:
    def test_lazy_singleton_and_close(self):
        first = backend_client.get_http_client()

        assert backend_client.get_http_client() is first

        asyncio.run(backend_client.close_http_client())

        assert backend_client._http_client is None
