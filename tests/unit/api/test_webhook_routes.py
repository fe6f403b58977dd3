"""Unit tests for webhook and health routes."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mirrorbot import __version__
from mirrorbot.api.dependencies import get_router
from mirrorbot.api.routes import health, webhooks


@pytest.fixture
def webhook_router() -> MagicMock:
    """Create a mock WebhookRouter."""
    router = MagicMock()
    router.dispatch.return_value = True
    router.tracker.active = 3
    return router


@pytest.fixture
def app(webhook_router: MagicMock) -> FastAPI:
    """Create a test FastAPI app with the router dependency overridden."""
    app = FastAPI()

    def override_get_router():
        yield webhook_router

    app.dependency_overrides[get_router] = override_get_router
    app.include_router(health.router)
    app.include_router(webhooks.router)
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.mark.unit
class TestWebhookRoute:
    """Tests for POST /{event_type}."""

    def test_accepted(self, client: TestClient, webhook_router: MagicMock) -> None:
        response = client.post("/job", content=b'{"build_id": 1}')

        assert response.status_code == 200
        assert response.json() == {"data": {"status": "accepted"}, "error": None}
        webhook_router.dispatch.assert_called_once_with("job", b'{"build_id": 1}')

    def test_malformed_body_still_accepted(
        self, client: TestClient, webhook_router: MagicMock
    ) -> None:
        """The response does not depend on how the payload is handled."""
        response = client.post("/pull_request", content=b"garbage")

        assert response.status_code == 200
        webhook_router.dispatch.assert_called_once_with("pull_request", b"garbage")

    def test_unknown_event(self, client: TestClient, webhook_router: MagicMock) -> None:
        webhook_router.dispatch.return_value = False

        response = client.post("/issue_comment", content=b"{}")

        assert response.status_code == 404
        assert response.json() == {"data": None, "error": "Unknown event type"}


@pytest.mark.unit
class TestHealthRoute:
    """Tests for GET /health."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "status": "healthy",
            "version": __version__,
            "active_tasks": 3,
        }


@pytest.mark.unit
class TestUninitialized:
    """Tests for routes used before the router is set up."""

    def test_get_router_requires_init(self) -> None:
        with pytest.raises(RuntimeError):
            next(get_router())
