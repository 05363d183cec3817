"""Unit tests for the health endpoint."""
from app.core.dependencies import get_sheets_client
from app.main import app
from app.services.sheets.client import SheetsClient


class TestHealth:
    """Test GET /health."""

    def test_healthy(self, test_client):
        """Test the health payload with a configured backend."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "ordersBackend": True}

    def test_backend_not_configured(self, test_client):
        """Test that a missing endpoint URL is reported."""
        app.dependency_overrides[get_sheets_client] = lambda: SheetsClient("")

        assert test_client.get("/health").json()["ordersBackend"] is False
