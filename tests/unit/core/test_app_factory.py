"""
Unit Tests for the FastAPI application factory
"""

from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.container import DependencyContainer


class TestAppFactory:
    def test_health_endpoint(self, test_settings):
        app = create_app(test_settings, create_schema=True)

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "environment": "test"}

    def test_lifespan_attaches_container(self, test_settings):
        app = create_app(test_settings)

        with TestClient(app):
            assert isinstance(app.state.container, DependencyContainer)

    def test_docs_only_in_debug(self, test_settings):
        assert create_app(test_settings).docs_url is None
        assert create_app(test_settings.model_copy(update={"DEBUG": True})).docs_url == "/docs"
