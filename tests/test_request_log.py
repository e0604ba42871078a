"""Unit tests for SQLite request logging."""

import pytest
from fastapi.testclient import TestClient

import api.main
from api.dependencies import get_backend
from api.logging import RequestLog, log_request
from core.database import create_schema, get_connection

AUTH = {"Authorization": "Bearer test-token"}


@pytest.fixture
def logged_requests(monkeypatch):
    """Enable request logging and capture rows instead of writing them."""
    captured = []
    monkeypatch.setattr(api.main, "REQUEST_LOG_ENABLED", True)
    monkeypatch.setattr(api.main, "log_request", captured.append)
    return captured


class TestRequestLog:
    def test_log_request_writes_row_and_details(self, tmp_path):
        db_path = tmp_path / "requests.db"
        conn = get_connection(db_path)
        create_schema(conn)
        conn.close()

        log = RequestLog(
            endpoint="/v1/calendar/events",
            method="POST",
            client_ip="10.0.0.1",
            status_code=422,
            error_code="VALIDATION_ERROR",
            error_message="Validation failed",
            processing_time_ms=12,
            details=[("validation_error", "Date is required")],
        )
        log_request(log, db_path)

        conn = get_connection(db_path)
        try:
            row = conn.execute(
                "SELECT endpoint, method, status_code, error_code FROM api_requests WHERE request_id = ?",
                (log.request_id,),
            ).fetchone()
            details = conn.execute(
                "SELECT detail_type, message FROM api_request_details WHERE request_id = ?",
                (log.request_id,),
            ).fetchall()
        finally:
            conn.close()

        assert row == ("/v1/calendar/events", "POST", 422, "VALIDATION_ERROR")
        assert details == [("validation_error", "Date is required")]

    def test_create_schema_is_idempotent(self, tmp_path):
        conn = get_connection(tmp_path / "requests.db")
        try:
            create_schema(conn)
            create_schema(conn)
            tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        finally:
            conn.close()

        assert {"api_requests", "api_request_details"} <= tables


class TestRequestLogMiddleware:
    def test_unauthorized_request_records_error_code(self, logged_requests):
        response = TestClient(api.main.app).get("/v1/calendar/events")

        assert response.status_code == 401
        assert len(logged_requests) == 1
        assert logged_requests[0].status_code == 401
        assert logged_requests[0].error_code == "UNAUTHORIZED"

    def test_validation_details_are_recorded(self, logged_requests, fake_backend):
        api.main.app.dependency_overrides[get_backend] = lambda: fake_backend.client()
        try:
            TestClient(api.main.app).post("/v1/calendar/events", json={"summary": "No date"}, headers=AUTH)
        finally:
            api.main.app.dependency_overrides.clear()

        log = logged_requests[0]
        assert log.error_code == "VALIDATION_ERROR"
        assert ("validation_error", "Date is required") in log.details

    def test_unhandled_error_is_logged_as_internal_error(self, logged_requests):
        def broken_backend():
            raise RuntimeError("boom")

        api.main.app.dependency_overrides[get_backend] = broken_backend
        try:
            response = TestClient(api.main.app, raise_server_exceptions=False).get(
                "/v1/calendar/events", headers=AUTH
            )
        finally:
            api.main.app.dependency_overrides.clear()

        assert response.status_code == 500
        assert logged_requests[0].status_code == 500
        assert logged_requests[0].error_code == "INTERNAL_ERROR"
        assert logged_requests[0].error_message == "Internal server error"
