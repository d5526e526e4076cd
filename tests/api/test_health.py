"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    response = client.get("/health")
    assert response.json()["service"] == "bank-admin-api"


def test_health_check_reports_database_status(client):
    """Monitoring relies on the database field being present."""
    data = client.get("/health").json()
    assert data["database"] in ("healthy", "unhealthy")
