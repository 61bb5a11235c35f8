"""
Pytest configuration for API integration tests
"""

import base64

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from tests.conftest import make_gradient


def encode_png(image):
    success, buffer = cv2.imencode(".png", image)
    assert success
    return base64.b64encode(buffer.tobytes()).decode("utf-8")


@pytest.fixture
def settings():
    """Settings used by the test app; tests may tweak them before requests"""
    from config import ImageSettings, Settings

    return Settings(environment="test", image=ImageSettings(default_thumbnail_size=40))


@pytest.fixture(scope="function")
def client(settings):
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from config import build_engine
    from core.image import ImageCodec
    from main import app

    app.state.codec = ImageCodec(build_engine(settings))
    app.state.settings = settings
    app.state.config = settings.to_dict()

    # Create test client (no context manager so lifespan does not replace the state)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client


@pytest.fixture
def pix_b64():
    """50x50 gradient PNG as base64"""
    return encode_png(make_gradient(50, 50))


@pytest.fixture
def pix2_b64():
    """100x50 gradient PNG as base64"""
    return encode_png(make_gradient(100, 50))


@pytest.fixture
def noise_b64():
    """200x200 random PNG (does not compress below 100 KB)"""
    rng = np.random.default_rng(7)
    return encode_png(rng.integers(0, 256, size=(200, 200, 3), dtype=np.uint8))
