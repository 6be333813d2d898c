"""
API Integration Tests for System Endpoints
"""


class TestSystemAPI:
    """Integration tests for root, health and /api/system"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "running"
        assert data["endpoints"]["transform"] == "/api/transform"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["services"]["image_tool_service"] is True

    def test_system_health(self, client):
        response = client.get("/api/system/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_status(self, client):
        response = client.get("/api/system/status")

        assert response.status_code == 200
        data = response.json()
        assert data["uptime"] >= 0
        assert data["memory_usage"]["process_mb"] > 0
        assert set(data["libraries"]) == {"numpy", "opencv", "pillow"}

    def test_config(self, client):
        response = client.get("/api/system/config")

        assert response.status_code == 200
        data = response.json()
        assert data["transform"]["default_output_format"] == "png"
        assert data["system"]["log_level"] in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
