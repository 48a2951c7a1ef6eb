"""
Tests for the health endpoint and error envelope
"""


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["environment"] == "test"
    assert "timestamp" in body


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_malformed_json_is_bad_request(client, auth_headers):
    response = client.post(
        "/api/customers",
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()
