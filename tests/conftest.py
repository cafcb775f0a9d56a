"""
Pytest configuration and shared fixtures

This module provides common fixtures and configuration for all tests.
"""

import os

# Settings are read at import time of the app, so the environment goes first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "true"
os.environ["LOG_LEVEL"] = "DEBUG"

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from imagestudio.main import app
from imagestudio.core.config import Settings, get_settings
from imagestudio.ai_engine.utils.logging_config import setup_logging
from imagestudio.ai_engine.utils.error_handler import ErrorHandler


# Configure test logging
setup_logging(log_level="DEBUG")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Override settings for testing"""
    return Settings(
        environment="testing",
        debug=True,
        log_level="DEBUG",
        max_image_size_mb=1,
    )


@pytest.fixture
def override_settings(test_settings):
    """Override the get_settings dependency"""
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield test_settings
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_settings) -> TestClient:
    """Create a test client for the FastAPI app"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_image() -> np.ndarray:
    """Random 48x64 BGR test image"""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, (48, 64, 3), dtype=np.uint8)


@pytest.fixture
def sample_image_bytes(sample_image) -> bytes:
    """Sample image encoded losslessly as PNG"""
    _, buffer = cv2.imencode('.png', sample_image)
    return buffer.tobytes()


@pytest.fixture
def flat_image_bytes() -> bytes:
    """Uniform mid-gray 16x16 PNG"""
    _, buffer = cv2.imencode('.png', np.full((16, 16, 3), 128, dtype=np.uint8))
    return buffer.tobytes()


@pytest.fixture
def error_handler_instance() -> ErrorHandler:
    """Fresh error handler so counts do not leak between tests"""
    return ErrorHandler(max_history_size=10)


# Markers for test categorization
def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "image_processing: mark test as exercising the raster filters"
    )
