"""
Integration tests for API endpoints
"""

import base64

import pytest

from imagestudio import main
from imagestudio.ai_engine.utils.error_handler import ErrorType
from imagestudio.core.services.generation_service import generate_image_url
from imagestudio.ai_engine.image_processing.utils.image_utils import decode_image


class TestHealthEndpoints:
    """Test health check endpoints"""

    def test_health_endpoint(self, client):
        """Test /health endpoint"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "uptime" in data
        assert "version" in data
        assert data["features"]["restore"] is True

    def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert data["name"] == "Image Studio"
        assert "version" in data
        assert "features" in data
        assert "documentation" in data

    def test_request_headers(self, client):
        response = client.get("/")

        assert "X-Process-Time" in response.headers
        assert int(response.headers["X-Request-Count"]) >= 1

    def test_api_routes_use_configured_prefix(self):
        prefix = main.settings.api_v1_prefix
        api_paths = [route.path for route in main.router.routes]

        assert api_paths
        assert all(path.startswith(prefix) for path in api_paths)
        assert {route.path for route in main.app.routes} >= set(api_paths)

    def test_debug_follows_settings(self):
        assert main.app.debug is main.settings.debug is True

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nope")

        assert response.status_code == 404
        assert response.json()["status_code"] == 404


class TestUploadValidation:
    """Upload checks shared by the filter endpoints"""

    def test_missing_file(self, client):
        response = client.post("/api/v1/restore")

        assert response.status_code == 422

    def test_non_image_content_type(self, client):
        files = {"file": ("test.txt", b"not an image", "text/plain")}
        response = client.post("/api/v1/restore", files=files)

        assert response.status_code == 400
        data = response.json()
        assert "must be an image" in data["error"]
        assert data["status_code"] == 400
        assert "timestamp" in data

    def test_empty_file(self, client):
        files = {"file": ("empty.png", b"", "image/png")}
        response = client.post("/api/v1/attention-score", files=files)

        assert response.status_code == 400
        assert "Empty" in response.json()["error"]

    def test_file_too_large(self, client):
        files = {"file": ("big.png", b"\0" * (1024 * 1024 + 1), "image/png")}
        response = client.post("/api/v1/restore", files=files)

        assert response.status_code == 413
        assert "too large" in response.json()["error"]

    def test_undecodable_image(self, client):
        files = {"file": ("broken.png", b"garbage bytes", "image/png")}
        response = client.post("/api/v1/restore", files=files)

        assert response.status_code == 400


class TestFilterEndpoints:
    """Test restore, enhance and attention score"""

    def test_restore(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post("/api/v1/restore", files=files, params={"strength": 0.8})

        assert response.status_code == 200
        data = response.json()

        assert data["success"] is True
        assert data["operation"] == "restore"
        assert data["parameters"] == {"strength": 0.8}
        assert data["content_type"] == "image/jpeg"
        assert 0.0 <= data["attention_score"] <= 10.0
        assert data["metadata"]["filename"] == "test.png"
        assert data["metrics"]["image_size"] == [64, 48]
        assert data["metrics"]["attention_score"] == data["attention_score"]
        assert {"mean_brightness", "std_brightness", "contrast"} <= set(data["metrics"])

        image = decode_image(base64.b64decode(data["processed_image"]))
        assert image.shape == (48, 64, 4)

    def test_restore_strength_clamped(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post("/api/v1/restore", files=files, params={"strength": 4})

        assert response.status_code == 200
        data = response.json()
        assert data["parameters"]["strength"] == 1.0
        assert data["warnings"]

    def test_enhance_super_resolution(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post(
            "/api/v1/enhance",
            files=files,
            params={"enhancement_type": "super-resolution", "upscale_factor": 3}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["output_size"] == [192, 144]
        assert decode_image(base64.b64decode(data["processed_image"])).shape == (144, 192, 4)

    @pytest.mark.parametrize("params", [
        {"enhancement_type": "style-transfer", "style": "vintage", "intensity": 0.6},
        {"enhancement_type": "colorization", "color_scheme": "cool"},
    ])
    def test_enhance_tone_filters(self, client, sample_image_bytes, params):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post("/api/v1/enhance", files=files, params=params)

        assert response.status_code == 200
        assert response.json()["operation"] == params["enhancement_type"]

    def test_enhance_unknown_type(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post("/api/v1/enhance", files=files, params={"enhancement_type": "restore"})

        assert response.status_code == 400
        assert "enhancement_type" in response.json()["error"]

    def test_enhance_unknown_style(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        response = client.post(
            "/api/v1/enhance",
            files=files,
            params={"enhancement_type": "style-transfer", "style": "noir"}
        )

        assert response.status_code == 400
        assert "noir" in response.json()["error"]

    def test_attention_score_of_flat_image(self, client, flat_image_bytes):
        files = {"file": ("flat.png", flat_image_bytes, "image/png")}
        response = client.post("/api/v1/attention-score", files=files)

        assert response.status_code == 200
        data = response.json()
        assert data["attention_score"] == 0.0
        assert "processed_image" not in data


class TestGenerationEndpoint:
    """Test mock generation"""

    def test_generate_single(self, client):
        response = client.post("/api/v1/generate", json={"prompt": "a red chair", "seed": 7})

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["seed"] == 7
        assert result["image_url"] == generate_image_url("a red chair", 7)
        assert result["model_type"] == "text-to-design-sdxl"

    def test_generate_batch(self, client):
        response = client.post(
            "/api/v1/generate",
            json={"prompt": "a red chair", "seed": 1, "batch": True, "batchCount": 9}
        )

        assert response.status_code == 200
        results = response.json()["result"]
        assert [r["seed"] for r in results] == [1, 2, 3, 4]

    def test_generate_blank_prompt(self, client):
        response = client.post("/api/v1/generate", json={"prompt": "  "})

        assert response.status_code == 400
        assert "Prompt is required" in response.json()["error"]

    def test_generate_missing_prompt(self, client):
        response = client.post("/api/v1/generate", json={})

        assert response.status_code == 422

    def test_generator_failure_is_reported(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("placeholder list unavailable")

        monkeypatch.setattr(main.generation_service, "build_results", broken)
        before = main.error_handler.error_counts.get(ErrorType.GENERATION_ERROR, 0)

        response = client.post("/api/v1/generate", json={"prompt": "a red chair"})

        assert response.status_code == 500
        assert response.json()["error"] == "Generation failed"
        assert main.error_handler.error_counts[ErrorType.GENERATION_ERROR] == before + 1


class TestStatisticsEndpoint:

    def test_processing_statistics(self, client, sample_image_bytes):
        files = {"file": ("test.png", sample_image_bytes, "image/png")}
        client.post("/api/v1/restore", files=files)

        response = client.get("/api/v1/processing-statistics")

        assert response.status_code == 200
        data = response.json()
        assert data["pipeline"]["operations"]["restore"] >= 1
        assert "errors" in data
        assert "generation" in data
        assert data["api_statistics"]["total_requests"] >= 2


pytestmark = pytest.mark.integration
