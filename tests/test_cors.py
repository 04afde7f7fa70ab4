"""Tests for the origin policy."""

import pytest

from recipe_favorites.api.cors import OriginPolicy
from recipe_favorites.config import DEFAULT_CORS_ORIGINS, MOBILE_DEV_ORIGIN_PATTERN


@pytest.fixture
def policy():
    return OriginPolicy(
        allowed_origins=DEFAULT_CORS_ORIGINS,
        allowed_pattern=MOBILE_DEV_ORIGIN_PATTERN,
    )


class TestOriginPolicy:
    """Test OriginPolicy.is_allowed."""

    def test_missing_origin_allowed(self, policy):
        """Non-browser clients send no Origin and are always allowed."""
        assert policy.is_allowed(None)
        assert policy.is_allowed("")

    def test_exact_origins_allowed(self, policy):
        """Allow-listed origins pass."""
        assert policy.is_allowed("http://localhost:8081")
        assert policy.is_allowed("http://localhost:19006")

    def test_match_is_exact_not_prefix(self, policy):
        """An allowed origin as a prefix does not count."""
        assert not policy.is_allowed("http://localhost:8081.evil.com")
        assert not policy.is_allowed("http://localhost:80")

    def test_mobile_dev_pattern(self, policy):
        """Expo Go on a 192.168.x.x LAN is allowed."""
        assert policy.is_allowed("exp://192.168.1.23:19000")
        assert not policy.is_allowed("exp://10.0.0.5:19000")
        assert not policy.is_allowed("exp://192.168.1.23:19001")

    def test_other_origins_rejected(self, policy):
        """Anything else is rejected."""
        assert not policy.is_allowed("https://evil.example.com")

    def test_no_pattern(self):
        """Pattern is optional."""
        policy = OriginPolicy(allowed_origins=("http://a.test",))
        assert not policy.is_allowed("exp://192.168.1.23:19000")


class TestOriginEnforcement:
    """Origin policy applied to requests."""

    def test_disallowed_origin_returns_403(self, client):
        """Requests from other origins get the CORS error payload."""
        response = client.get("/favorites/u1", headers={"Origin": "https://evil.example.com"})
        assert response.status_code == 403
        assert response.json() == {"error": "CORS policy violation"}

    def test_disallowed_origin_cannot_create(self, client, engine):
        """Rejection happens before the handler runs."""
        response = client.post(
            "/favorites",
            json={"userId": "u1", "recipeId": 1, "title": "Soup"},
            headers={"Origin": "https://evil.example.com"},
        )
        assert response.status_code == 403
        assert client.get("/favorites/u1").json() == []

    def test_no_origin_accepted(self, client):
        """curl and native apps send no Origin."""
        assert client.get("/health").status_code == 200

    def test_allowed_origin_gets_cors_headers(self, client):
        """Allowed browser origins are echoed back."""
        response = client.get("/health", headers={"Origin": "http://localhost:8081"})
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:8081"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_mobile_origin_accepted(self, client):
        """Expo LAN origin passes."""
        response = client.get("/health", headers={"Origin": "exp://192.168.0.12:19000"})
        assert response.status_code == 200

    def test_preflight_allowed(self, client):
        """Preflight from an allowed origin succeeds."""
        response = client.options(
            "/favorites",
            headers={
                "Origin": "http://localhost:19006",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_preflight_disallowed_returns_403(self, client):
        """Preflight from a rejected origin gets the same 403 payload."""
        response = client.options(
            "/favorites",
            headers={
                "Origin": "https://evil.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 403
        assert response.json() == {"error": "CORS policy violation"}

    def test_disallowed_origin_rejected_on_unknown_route(self, client):
        """Rejection does not depend on a route matching."""
        response = client.get("/nope", headers={"Origin": "https://evil.example.com"})
        assert response.status_code == 403
        assert response.json() == {"error": "CORS policy violation"}

    def test_disallowed_origin_rejected_before_body_parsing(self, client):
        """A malformed body from a rejected origin still gets the 403."""
        response = client.post(
            "/favorites",
            content="{bad",
            headers={
                "Origin": "https://evil.example.com",
                "Content-Type": "application/json",
            },
        )
        assert response.status_code == 403
        assert response.json() == {"error": "CORS policy violation"}
