from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session


def test_rating_statistics(client: TestClient, workshop: Session, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/valoraciones/estadisticas", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "totalValoraciones": 3,
        "promedioCalificacion": "4.33",
        "distribucion": {"cinco": 1, "cuatro": 2, "tres": 0, "dos": 0, "uno": 0},
    }


def test_rating_statistics_without_ratings(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/valoraciones/estadisticas", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["totalValoraciones"] == 0
    assert body["promedioCalificacion"] == "0.00"
    assert sum(body["distribucion"].values()) == 0


def test_rating_statistics_require_authentication(client: TestClient) -> None:
    response = client.get("/api/valoraciones/estadisticas")

    assert response.status_code == 401
    assert response.json() == {"error": "Token no proporcionado"}
