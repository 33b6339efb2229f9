"""Tests for the cluster endpoints."""
import uuid

from conftest import AUTH


def create_cluster(client, name="alpha"):
    cluster_id = str(uuid.uuid4())
    response = client.post("/v1/clusters", json={"id": cluster_id, "name": name}, headers=AUTH)
    assert response.status_code == 201
    return response.json()


def test_create_then_get(client):
    created = create_cluster(client, "alpha")
    assert created["created_at"] is not None

    response = client.get(f"/v1/clusters/{created['id']}", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["name"] == "alpha"


def test_list_clusters(client):
    create_cluster(client, "alpha")
    create_cluster(client, "beta")

    response = client.get("/v1/clusters", headers=AUTH)
    assert response.status_code == 200
    assert sorted(c["name"] for c in response.json()) == ["alpha", "beta"]


def test_duplicate_create_is_server_error(client):
    created = create_cluster(client)

    response = client.post("/v1/clusters", json={"id": created["id"], "name": "again"}, headers=AUTH)
    assert response.status_code == 500
    assert response.text.startswith("Something went wrong: ")


def test_get_unknown_cluster(client):
    response = client.get(f"/v1/clusters/{uuid.uuid4()}", headers=AUTH)
    assert response.status_code == 404
    assert response.text == "Not found"


def test_get_with_malformed_id(client):
    response = client.get("/v1/clusters/not-a-uuid", headers=AUTH)
    assert response.status_code == 400


def test_update_cluster(client):
    created = create_cluster(client, "alpha")

    response = client.put("/v1/clusters", json={"id": created["id"], "name": "gamma"}, headers=AUTH)
    assert response.status_code == 200
    assert response.json()["name"] == "gamma"
    assert response.json()["updated_at"] is not None


def test_update_unknown_cluster(client):
    response = client.put("/v1/clusters", json={"id": str(uuid.uuid4()), "name": "x"}, headers=AUTH)
    assert response.status_code == 404
    assert "Something went wrong" in response.text


def test_delete_cluster(client):
    created = create_cluster(client)

    response = client.delete(f"/v1/clusters/{created['id']}", headers=AUTH)
    assert response.status_code == 200
    assert response.text == created["id"]
    assert client.get(f"/v1/clusters/{created['id']}", headers=AUTH).status_code == 404


def test_delete_unknown_cluster(client):
    response = client.delete(f"/v1/clusters/{uuid.uuid4()}", headers=AUTH)
    assert response.status_code == 500
