from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_root_endpoint(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"service": "Motoshop Backend", "status": "running"}


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/no-existe")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
