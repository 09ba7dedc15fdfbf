"""Tests for the admin-only user management routes."""
from __future__ import annotations


def test_list_users_admin_only(client, admin, alice) -> None:
    response = client.get("/api/users", headers=admin.headers)

    assert response.status_code == 200
    users = response.get_json()
    assert {user["username"] for user in users} == {"admin", "alice"}
    assert all("password_hash" not in user for user in users)
    alice_row = next(user for user in users if user["username"] == "alice")
    assert alice_row["createdBy"] == admin.id

    assert client.get("/api/users", headers=alice.headers).status_code == 403


def test_delete_self_is_rejected(client, admin) -> None:
    response = client.delete(f"/api/users/{admin.id}", headers=admin.headers)

    assert response.status_code == 400
    assert response.get_json() == {"error": "No puedes eliminarte a ti mismo"}


def test_delete_unknown_user(client, admin) -> None:
    response = client.delete("/api/users/does-not-exist", headers=admin.headers)

    assert response.status_code == 404
    assert response.get_json() == {"error": "Usuario no encontrado"}


def test_non_admin_cannot_delete_users(client, alice, bob) -> None:
    response = client.delete(f"/api/users/{bob.id}", headers=alice.headers)

    assert response.status_code == 403


def test_non_admin_is_forbidden_before_self_check(client, alice) -> None:
    response = client.delete(f"/api/users/{alice.id}", headers=alice.headers)

    assert response.status_code == 403


def test_delete_user_with_owned_records(client, admin, alice, seed) -> None:
    refs = seed(alice.headers)

    response = client.delete(f"/api/users/{alice.id}", headers=admin.headers)

    assert response.status_code == 400
    message = response.get_json()["error"]
    assert "1 servicios" in message
    assert "1 personal" in message
    assert "1 clientes" in message
    assert "citas" not in message

    for path in (f"/api/clients/{refs.client_id}", f"/api/services/{refs.service_id}",
                 f"/api/staff/{refs.staff_id}"):
        assert client.delete(path, headers=alice.headers).status_code == 200

    response = client.delete(f"/api/users/{alice.id}", headers=admin.headers)
    assert response.status_code == 200
    assert response.get_json() == {"success": True}

    login = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert login.status_code == 401


def test_reset_password(client, admin, alice) -> None:
    response = client.put(
        f"/api/users/{alice.id}/password", json={"password": "nueva-clave"}, headers=admin.headers
    )

    assert response.status_code == 200
    assert response.get_json()["success"] is True

    old = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    new = client.post("/api/auth/login", json={"username": "alice", "password": "nueva-clave"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_reset_password_validation(client, admin, alice) -> None:
    short = client.put(f"/api/users/{alice.id}/password", json={"password": "123"}, headers=admin.headers)
    unknown = client.put("/api/users/nope/password", json={"password": "secret9"}, headers=admin.headers)
    forbidden = client.put(f"/api/users/{alice.id}/password", json={"password": "secret9"}, headers=alice.headers)

    assert short.status_code == 400
    assert unknown.status_code == 404
    assert forbidden.status_code == 403
