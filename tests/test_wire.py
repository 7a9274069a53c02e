"""Tests for MessagePack encoding, error bodies and the health check."""

import msgpack

from conftest import MSGPACK_HEADERS, unpack_response
from resto_rate.api.wire import is_msgpack


def test_is_msgpack():
    assert is_msgpack("application/msgpack")
    assert is_msgpack("application/msgpack; charset=binary")
    assert is_msgpack("application/x-msgpack")
    assert not is_msgpack("application/json")
    assert not is_msgpack(None)


def test_msgpack_request_body(client):
    response = client.post(
        "/api/auth/register",
        content=msgpack.packb({"username": "alice", "password": "secret1"}),
        headers=MSGPACK_HEADERS,
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/msgpack"
    data = msgpack.unpackb(response.content)
    assert data["user"]["username"] == "alice"


def test_msgpack_response_uses_camel_case_and_iso_dates(client, auth_headers):
    data = unpack_response(client.get("/api/users/me/profile", headers=auth_headers))

    user = data["user"]
    assert set(user) >= {"id", "googleId", "isAdmin", "createdAt", "updatedAt"}
    assert isinstance(user["createdAt"], str)


def test_empty_msgpack_body_is_absent(client):
    response = client.post("/api/auth/login", content=b"", headers=MSGPACK_HEADERS)
    assert response.status_code == 400


def test_undecodable_msgpack_body(client):
    response = client.post("/api/auth/login", content=b"\xc1\xc1\xc1", headers=MSGPACK_HEADERS)
    assert response.status_code == 400
    assert "error" in response.json()


def test_msgpack_body_on_update(client, auth_headers):
    response = client.put(
        f"/api/users/{auth_headers.user_id}",
        content=msgpack.packb({"age": 44}),
        headers={**auth_headers, **MSGPACK_HEADERS},
    )

    assert response.status_code == 200
    assert unpack_response(response)["user"]["age"] == 44


def test_errors_are_json(client):
    response = client.get("/api/auth/verify")

    assert response.status_code == 401
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Authentication required", "kind": "unauthenticated"}


def test_validation_errors_list_fields(client):
    response = client.post("/api/auth/login", json={"username": "alice"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request data"
    assert {"field": "password", "message": "Field required"} in body["details"]


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == {"connected": True}
    assert data["environment"] == "test"
    assert data["timestamp"]


def test_health_check_degraded(client, app, monkeypatch):
    monkeypatch.setattr(app.state.database, "ping", lambda: False)

    data = client.get("/health").json()

    assert data["status"] == "degraded"
    assert data["database"] == {"connected": False}
