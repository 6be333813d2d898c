"""
Pytest configuration for API integration tests
"""

import pytest
from fastapi.testclient import TestClient

from core.image.converters import ImageConverters


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh service to avoid state contamination.
    """
    from config import Settings, TransformSettings
    from main import app
    from services.image_tool_service import ImageToolService

    transform_settings = TransformSettings(default_output_format="png")
    test_settings = Settings(transform=transform_settings)

    # Set in app state
    app.state.image_tool_service = ImageToolService(
        default_quality=transform_settings.jpeg_quality,
        default_compression=transform_settings.png_compression,
    )
    app.state.transform_settings = transform_settings
    app.state.config = test_settings.to_dict()
    app.state.debug = False

    # Create test client (no context manager, the lifespan would reload settings)
    yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def to_base64():
    """Factory: base64 string of encoded image bytes"""
    return ImageConverters.bytes_to_base64


@pytest.fixture
def png_base64(png_bytes):
    """Gradient buffer as base64 PNG"""
    return ImageConverters.bytes_to_base64(png_bytes)
