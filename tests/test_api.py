"""Tests for the HTTP API - stubbed upstream, no internet."""

import httpx
import pytest
from fastapi.testclient import TestClient

from bgcheck.api import create_app
from bgcheck.config import CheckerConfig, LogFormat

from conftest import ACCOUNT_ID, FIXTURES_DIR, register_account


@pytest.fixture
def client(config, upstream):
    """TestClient with the lifespan (and so the shared Checker) running."""
    with TestClient(create_app(config, transport=upstream.transport)) as client:
        yield client


class TestSystemEndpoints:
    """Tests for health and config endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_config(self, client):
        response = client.get("/api/config")
        assert response.status_code == 200
        data = response.json()
        assert data["friends_page_limit"] == 200
        assert data["blacklist_loaded"] is False


class TestLookupEndpoint:
    """Tests for GET /api/roblox/user."""

    def test_missing_id(self, client):
        response = client.get("/api/roblox/user")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing 'id' query parameter"}

    @pytest.mark.parametrize("raw", ["abc", "0", "-3", "1.5"])
    def test_invalid_id(self, client, raw):
        response = client.get("/api/roblox/user", params={"id": raw})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid 'id' query parameter"}

    def test_invalid_id_makes_no_upstream_calls(self, client, upstream):
        client.get("/api/roblox/user", params={"id": "abc"})
        assert upstream.requests == []

    def test_unknown_account_propagates_404(self, client):
        response = client.get("/api/roblox/user", params={"id": "5"})
        assert response.status_code == 404
        assert "error" in response.json()

    def test_upstream_status_propagated(self, client, upstream):
        p = register_account(upstream)
        upstream.fail(p["profile"], status=429)

        response = client.get("/api/roblox/user", params={"id": str(ACCOUNT_ID)})

        assert response.status_code == 429

    def test_successful_lookup(self, client, upstream):
        register_account(upstream)

        response = client.get("/api/roblox/user", params={"id": str(ACCOUNT_ID)})

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["username"] == "captain_harbor"
        assert data["profile"]["friends_count"] == 25
        assert data["risk"]["level"] == "Low"
        assert all(data["verification"].values())
        assert response.headers["cache-control"].startswith("no-store")

    def test_partial_data_still_200(self, client, upstream):
        p = register_account(upstream)
        upstream.fail(p["groups"])
        upstream.fail(p["avatar"])

        response = client.get("/api/roblox/user", params={"id": str(ACCOUNT_ID)})

        assert response.status_code == 200
        data = response.json()
        assert data["groups"] == []
        assert data["profile"]["avatar_url"] is None
        assert data["verification"]["groups_verified"] is False
        assert data["risk"]["level"] != "Low"


class TestEvaluateEndpoint:
    """Tests for GET /api/evaluate."""

    def test_evaluate_shape(self, client, upstream):
        register_account(upstream)

        response = client.get("/api/evaluate", params={"id": str(ACCOUNT_ID)})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"division", "blacklist", "risk", "requirements", "counts"}
        assert data["division"] == "default"
        assert data["requirements"]["min_badges"] == 300
        assert data["counts"]["groups_count"] == 12
        assert response.headers["cache-control"].startswith("no-store")

    def test_evaluate_with_blacklist(self, upstream):
        register_account(upstream)
        config = CheckerConfig(
            log_level="WARNING",
            log_format=LogFormat.JSON,
            blacklist_path=str(FIXTURES_DIR / "blacklist.json"),
        )

        with TestClient(create_app(config, transport=upstream.transport)) as client:
            response = client.get("/api/evaluate", params={"id": str(ACCOUNT_ID), "division": "intel"})

        data = response.json()
        assert data["division"] == "intel"
        assert [e["division_id"] for e in data["blacklist"]["cross_division"]] == ["navy"]
        assert data["risk"]["level"] == "Medium"
        assert "Cross-division blacklist detected" in data["risk"]["warnings"]

    def test_evaluate_missing_id(self, client):
        response = client.get("/api/evaluate", params={"division": "navy"})
        assert response.status_code == 400


class TestUnexpectedErrors:
    """Unhandled failures become a generic 500."""

    def test_internal_error(self, config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("boom")

        app = create_app(config, transport=httpx.MockTransport(handler))
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/roblox/user", params={"id": str(ACCOUNT_ID)})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
