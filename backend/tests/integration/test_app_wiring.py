"""Tests for cross-cutting application behaviour: errors, health, headers."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError

from excursion_api.services.auth import AuthService

LOGIN = "/api/v1/auth/login"
CREDENTIALS = {"email": "someone@example.com", "password": "whatever"}


def _raise(exc):
    def _fn(*args, **kwargs):
        raise exc

    return _fn


class TestHealth:
    def test_reports_database_status(self, client):
        resp = client.get("/api/v1/health")

        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok", "db": "ok", "version": "dev"}


class TestErrorHandling:
    def test_unknown_route_is_a_problem(self, client):
        resp = client.get("/api/v1/nope")

        assert resp.status_code == 404
        assert resp.mimetype == "application/problem+json"
        problem = resp.get_json()
        assert problem["detail"] == "Route '/api/v1/nope' not found"
        assert problem["instance"] == "/api/v1/nope"

    def test_method_not_allowed(self, client):
        resp = client.get(LOGIN)

        assert resp.status_code == 405
        assert resp.get_json()["code"] == "method_not_allowed"

    def test_unexpected_error_hides_details(self, client, monkeypatch):
        monkeypatch.setattr(AuthService, "login", _raise(RuntimeError("secret internals")))

        resp = client.post(LOGIN, json=CREDENTIALS)

        assert resp.status_code == 500
        problem = resp.get_json()
        assert problem["code"] == "internal_server_error"
        assert "secret internals" not in resp.get_data(as_text=True)

    def test_database_unavailable(self, client, monkeypatch):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
        monkeypatch.setattr(AuthService, "login", _raise(exc))

        resp = client.post(LOGIN, json=CREDENTIALS)

        assert resp.status_code == 503
        assert resp.get_json()["code"] == "service_unavailable"

    def test_integrity_error_is_a_conflict(self, client, monkeypatch):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: roles.name"))
        monkeypatch.setattr(AuthService, "login", _raise(exc))

        resp = client.post(LOGIN, json=CREDENTIALS)

        assert resp.status_code == 409
        assert "roles.name" not in resp.get_data(as_text=True)


class TestRequestCorrelation:
    def test_echoes_incoming_request_id(self, client):
        resp = client.get("/api/v1/nope", headers={"X-Request-ID": "req-123"})

        assert resp.headers["X-Request-ID"] == "req-123"
        assert resp.get_json()["request_id"] == "req-123"

    def test_generates_a_fresh_id_per_request(self, client):
        first = client.get("/api/v1/health").headers["X-Request-ID"]
        second = client.get("/api/v1/health").headers["X-Request-ID"]

        assert first and second
        assert first != second


class TestCors:
    def test_preflight_allows_frontend_origin(self, client):
        resp = client.options(
            LOGIN,
            headers={
                "Origin": "http://localhost:4200",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type, Authorization",
            },
        )

        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:4200"

    def test_exposes_request_id_to_the_frontend(self, client):
        resp = client.get("/api/v1/health", headers={"Origin": "http://localhost:4200"})

        assert "X-Request-ID" in resp.headers.get("Access-Control-Expose-Headers", "")
