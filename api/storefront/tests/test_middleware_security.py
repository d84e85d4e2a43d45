"""Tests for security middleware and request-id handling."""
from __future__ import annotations

from fastapi.testclient import TestClient


class TestSecurityHeaders:
    """Tests for security headers middleware."""

    def test_x_content_type_options_present(self, client: TestClient):
        response = client.get("/healthz")
        assert response.headers.get("X-Content-Type-Options") == "nosniff"

    def test_x_frame_options_present(self, client: TestClient):
        response = client.get("/healthz")
        assert response.headers.get("X-Frame-Options") == "DENY"

    def test_referrer_policy_present(self, client: TestClient):
        response = client.get("/healthz")
        assert response.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"

    def test_geolocation_allowed_for_self(self, client: TestClient):
        """The browser geolocation fallback needs geolocation=(self)."""
        permissions = client.get("/healthz").headers.get("Permissions-Policy")
        assert "geolocation=(self)" in permissions
        assert "camera=()" in permissions

    def test_csp_development_mode(self, client: TestClient):
        csp = client.get("/healthz").headers.get("Content-Security-Policy")
        assert "default-src 'self'" in csp
        assert "unsafe-inline" in csp
        assert "ws://localhost:*" in csp

    def test_no_hsts_outside_production(self, client: TestClient):
        assert "Strict-Transport-Security" not in client.get("/healthz").headers

    def test_headers_on_error_response(self, client: TestClient):
        response = client.get("/stores?lat=1")
        assert response.status_code == 400
        assert response.headers.get("X-Content-Type-Options") == "nosniff"


class TestRequestId:
    def test_request_id_echoed(self, client: TestClient):
        response = client.get("/healthz", headers={"x-request-id": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"

    def test_request_id_generated(self, client: TestClient):
        response = client.get("/healthz")
        assert response.headers.get("x-request-id")
