"""
API Integration Tests for Color Endpoints
"""

import numpy as np
import pytest

from core.pixel_buffer import PixelBuffer


class TestColorAPI:
    """Integration tests for /api/color"""

    @pytest.fixture
    def solid_base64(self, solid, encode, to_base64):
        return to_base64(encode(solid(8, 8, (10, 20, 30))))

    def test_average_int(self, client, solid_base64):
        response = client.post("/api/color/average", json={"image": solid_base64})

        assert response.status_code == 200
        data = response.json()
        assert data["color"] == 0x0A141E
        assert data["format"] == "int"

    def test_average_hex(self, client, solid_base64):
        request_data = {"image": solid_base64, "format": "hex"}
        response = client.post("/api/color/average", json=request_data)

        assert response.status_code == 200
        assert response.json() == {"color": "0a141e", "format": "hex"}

    def test_dominant(self, client, encode, to_base64):
        pixels = np.zeros((100, 100, 4), dtype=np.uint8)
        pixels[:, :] = (0, 0, 255, 255)
        pixels[:50, :50] = (255, 0, 0, 255)
        image = to_base64(encode(PixelBuffer(pixels)))

        request_data = {"image": image, "format": "hex"}
        response = client.post("/api/color/dominant", json=request_data)

        assert response.status_code == 200
        assert response.json()["color"] == "ff0000"

    def test_unknown_format(self, client, solid_base64):
        request_data = {"image": solid_base64, "format": "rgb"}
        response = client.post("/api/color/average", json=request_data)
        assert response.status_code == 422

    def test_invalid_image(self, client):
        response = client.post("/api/color/dominant", json={"image": "@@@"})

        assert response.status_code == 400
        assert response.json()["type"] == "InvalidInput"
