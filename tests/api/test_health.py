import pytest
from fastapi.testclient import TestClient

from binder_scan.api.deps import get_settings_dependency
from binder_scan.main import create_app


@pytest.fixture
def client(test_settings):
    app = create_app()
    app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "service": "binder-scan-api",
        "version": "0.1.0",
        "visionProvider": "openai",
        "visionModel": "gpt-4o-mini",
        "hasVisionKey": True,
        "hasPokemonTcgKey": False,
    }


def test_health_check_echoes_correlation_id(client):
    response = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_health_check_generates_correlation_id(client):
    response = client.get("/api/health")
    assert response.headers["X-Correlation-ID"]
