from flask.testing import FlaskClient


def test_ping_returns_pong(client: FlaskClient):
    response = client.get("/api/v1/ping")

    assert response.status_code == 200
    assert response.json == {"success": True, "data": {"message": "pong", "database": True}}
