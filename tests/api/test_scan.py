"""
Test suite for the scan endpoints.

Tests request validation, error mapping and response serialization with a
mocked ScanService.

System role: Verification of the scan HTTP API
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from binder_scan.api.deps import get_scan_service, get_settings_dependency
from binder_scan.core.exceptions import (
    ConfigurationError,
    UnsupportedPromptVariantError,
    VisionModelError,
)
from binder_scan.main import create_app
from binder_scan.models.scan import CardPrice, ScannedCard, ScanResponse


@pytest.fixture
def scan_response() -> ScanResponse:
    """Provide a one-card scan result."""
    return ScanResponse(
        cards=[
            ScannedCard(
                position=1,
                name="Charizard ex",
                set_name="Obsidian Flames",
                collector_number="125/197",
                confidence=0.9,
                matched=True,
                match_strategy="set_number",
                catalog_id="sv3-125",
                image_url="https://images.pokemontcg.io/sv3/125_hires.png",
                price=CardPrice(amount=24.99, currency="USD", source="tcgplayer"),
            )
        ],
        count=1,
        matched_count=1,
        model="gpt-4o-mini",
        prompt_variant="binder",
        elapsed_ms=12.5,
    )


@pytest.fixture
def mock_scan_service(scan_response) -> AsyncMock:
    """Provide mock scan service."""
    service = AsyncMock()
    service.scan.return_value = scan_response
    return service


@pytest.fixture
def client(mock_scan_service, test_settings):
    app = create_app()
    app.dependency_overrides[get_scan_service] = lambda: mock_scan_service
    app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    return TestClient(app)


class TestScanEndpoint:
    """Test suite for POST /api/scan."""

    def test_scan_should_return_camel_case_response(self, client, mock_scan_service, png_base64):
        # Act
        response = client.post(
            "/api/scan",
            json={"imageBase64": png_base64, "promptVariant": "binder", "includePrices": False},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["matchedCount"] == 1
        card = data["cards"][0]
        assert card["collectorNumber"] == "125/197"
        assert card["matchStrategy"] == "set_number"
        assert card["imageUrl"].endswith("125_hires.png")
        assert card["price"]["amount"] == 24.99

        image = mock_scan_service.scan.await_args.args[0]
        assert image.mime_type == "image/png"
        assert mock_scan_service.scan.await_args.kwargs == {
            "prompt_variant": "binder",
            "enrich": True,
            "include_prices": False,
        }

    def test_scan_should_accept_snake_case_body(self, client, png_base64):
        response = client.post("/api/scan", json={"image_base64": png_base64})
        assert response.status_code == 200

    def test_missing_image_should_return_400(self, client, mock_scan_service):
        response = client.post("/api/scan", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Missing imageBase64"
        mock_scan_service.scan.assert_not_awaited()

    def test_invalid_base64_should_return_400(self, client):
        response = client.post("/api/scan", json={"imageBase64": "@@not*base64@@"})

        assert response.status_code == 400
        assert response.json()["error"] == "imageBase64 is not valid base64"

    def test_oversized_image_should_return_413(self, client):
        import base64

        payload = base64.b64encode(b"\xff\xd8\xff" + b"\x00" * 4096).decode()

        response = client.post("/api/scan", json={"imageBase64": payload})

        assert response.status_code == 413
        assert response.json()["details"]["max_bytes"] == 1024

    def test_malformed_body_should_return_400(self, client):
        response = client.post(
            "/api/scan",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_unknown_variant_should_return_400(self, client, mock_scan_service, png_base64):
        mock_scan_service.scan.side_effect = UnsupportedPromptVariantError(
            "sideways", ["binder", "single"]
        )

        response = client.post("/api/scan", json={"imageBase64": png_base64, "promptVariant": "sideways"})

        assert response.status_code == 400
        assert response.json()["details"]["available"] == ["binder", "single"]

    def test_missing_vision_key_should_return_500(self, client, mock_scan_service, png_base64):
        mock_scan_service.scan.side_effect = ConfigurationError(
            "Vision API key not configured", setting="OPENAI_API_KEY"
        )

        response = client.post("/api/scan", json={"imageBase64": png_base64})

        assert response.status_code == 500
        assert response.json()["error"] == "Vision API key not configured"

    def test_vision_failure_should_return_502(self, client, mock_scan_service, png_base64):
        mock_scan_service.scan.side_effect = VisionModelError(
            "Vision model request failed", model="gpt-4o-mini"
        )

        response = client.post("/api/scan", json={"imageBase64": png_base64})

        assert response.status_code == 502
        assert response.json()["success"] is False

    def test_unexpected_error_should_return_generic_500(self, client, mock_scan_service, png_base64):
        mock_scan_service.scan.side_effect = RuntimeError("secret internals")

        response = client.post("/api/scan", json={"imageBase64": png_base64})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to scan image"
        assert "secret" not in response.text


class TestScanUploadEndpoint:
    """Test suite for POST /api/scan/upload."""

    def test_upload_should_scan_file(self, client, mock_scan_service, jpeg_bytes):
        response = client.post(
            "/api/scan/upload",
            files={"image": ("page.jpg", jpeg_bytes, "image/jpeg")},
            data={"promptVariant": "single", "includePrices": "false"},
        )

        assert response.status_code == 200
        image = mock_scan_service.scan.await_args.args[0]
        assert image.mime_type == "image/jpeg"
        assert image.size_bytes == len(jpeg_bytes)
        assert mock_scan_service.scan.await_args.kwargs == {
            "prompt_variant": "single",
            "enrich": True,
            "include_prices": False,
        }

    def test_upload_without_file_should_return_400(self, client, mock_scan_service):
        response = client.post("/api/scan/upload", data={"promptVariant": "binder"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing image"
        mock_scan_service.scan.assert_not_awaited()

    def test_upload_of_non_image_should_return_400(self, client):
        response = client.post(
            "/api/scan/upload",
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
