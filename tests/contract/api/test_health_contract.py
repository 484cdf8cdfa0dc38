def test_health_check_contract(client):
    """Contract test for health check endpoint
    Verifies the response schema and format matches the API contract
    """
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()

    # Schema validation
    assert isinstance(data, dict)
    for key in ("status", "service", "version", "backend", "dependencies", "timestamp"):
        assert key in data

    # Type validation
    assert isinstance(data["status"], str)
    assert isinstance(data["service"], str)
    assert isinstance(data["version"], str)

    # Value validation
    assert data["status"] in ["healthy", "unhealthy"]
    assert data["service"] == "api_gateway"
    assert data["dependencies"]["user_store"]["status"] == "healthy"
