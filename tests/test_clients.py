"""Tests for the clients routes and the ownership rules they enforce."""
from __future__ import annotations

CLIENT = {"name": "Lucía", "phone": "600111222", "email": "lucia@example.com", "notes": "Alergia al látex"}


def test_create_client(client, alice) -> None:
    response = client.post("/api/clients", json=CLIENT, headers=alice.headers)

    assert response.status_code == 201
    body = response.get_json()
    assert {key: body[key] for key in CLIENT} == CLIENT
    assert body["createdBy"] == alice.id


def test_create_client_requires_phone(client, alice) -> None:
    response = client.post("/api/clients", json={"name": "Lucía", "phone": "  "}, headers=alice.headers)

    assert response.status_code == 400
    assert response.get_json() == {"error": "Faltan campos requeridos: phone"}


def test_update_clears_optional_fields(client, alice) -> None:
    created = client.post("/api/clients", json=CLIENT, headers=alice.headers).get_json()

    response = client.put(
        f"/api/clients/{created['id']}",
        json={"name": "Lucía P.", "phone": "600333444"},
        headers=alice.headers,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["name"] == "Lucía P."
    assert body["email"] is None
    assert body["notes"] is None


def test_other_user_cannot_modify_client(client, alice, bob, admin) -> None:
    created = client.post("/api/clients", json=CLIENT, headers=alice.headers).get_json()
    path = f"/api/clients/{created['id']}"

    put = client.put(path, json={**CLIENT, "name": "Otra"}, headers=bob.headers)
    delete = client.delete(path, headers=bob.headers)

    assert put.status_code == 403
    assert put.get_json() == {"error": "No puedes editar clientes de otros usuarios"}
    assert delete.status_code == 403
    assert delete.get_json() == {"error": "No puedes eliminar clientes de otros usuarios"}

    # Reading stays open to everyone.
    assert client.get(path, headers=bob.headers).status_code == 200

    by_admin = client.put(path, json={**CLIENT, "name": "Editada"}, headers=admin.headers)
    assert by_admin.status_code == 200
    assert by_admin.get_json()["name"] == "Editada"
    assert by_admin.get_json()["createdBy"] == alice.id


def test_owner_deletes_client(client, alice) -> None:
    created = client.post("/api/clients", json=CLIENT, headers=alice.headers).get_json()

    response = client.delete(f"/api/clients/{created['id']}", headers=alice.headers)

    assert response.status_code == 200
    assert client.get(f"/api/clients/{created['id']}", headers=alice.headers).status_code == 404


def test_user_cannot_modify_admin_records(client, admin, alice) -> None:
    created = client.post("/api/clients", json=CLIENT, headers=admin.headers).get_json()

    response = client.delete(f"/api/clients/{created['id']}", headers=alice.headers)

    assert response.status_code == 403


def test_missing_record_is_404_before_ownership(client, bob) -> None:
    response = client.delete("/api/clients/unknown", headers=bob.headers)

    assert response.status_code == 404
    assert response.get_json() == {"error": "Cliente no encontrado"}


def test_non_object_body_is_rejected(client, alice) -> None:
    response = client.post("/api/clients", json=["Lucía", "600111222"], headers=alice.headers)

    assert response.status_code == 400
