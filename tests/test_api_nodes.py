"""Tests for the node endpoints."""
import uuid

from conftest import AUTH


def create_cluster(client, name="alpha"):
    response = client.post("/v1/clusters", json={"id": str(uuid.uuid4()), "name": name}, headers=AUTH)
    assert response.status_code == 201
    return response.json()


def create_node(client, cluster_id, name="box", status="poweroff"):
    body = {"id": str(uuid.uuid4()), "name": name, "cluster_id": cluster_id, "status": status}
    response = client.post("/v1/nodes", json=body, headers=AUTH)
    assert response.status_code == 201
    return response.json()


def test_create_then_get(client):
    cluster = create_cluster(client)
    node = create_node(client, cluster["id"], "box", "rebooting")

    response = client.get(f"/v1/nodes/{node['id']}", headers=AUTH)
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "box"
    assert body["cluster_id"] == cluster["id"]
    assert body["status"] == "rebooting"


def test_create_with_unknown_status(client):
    cluster = create_cluster(client)
    body = {"id": str(uuid.uuid4()), "name": "box", "cluster_id": cluster["id"], "status": "sleeping"}

    response = client.post("/v1/nodes", json=body, headers=AUTH)
    assert response.status_code == 400


def test_filter_by_cluster_name(client):
    alpha = create_cluster(client, "alpha")
    beta = create_cluster(client, "beta")
    box = create_node(client, alpha["id"], "box")
    create_node(client, beta["id"], "crate")

    response = client.get("/v1/nodes", params={"name": "alph"}, headers=AUTH)
    assert response.status_code == 200
    assert [n["id"] for n in response.json()] == [box["id"]]

    response = client.get("/v1/nodes", headers=AUTH)
    assert len(response.json()) == 2


def test_patch_status(client):
    cluster = create_cluster(client)
    node = create_node(client, cluster["id"], status="poweroff")

    response = client.patch("/v1/nodes", json={"id": node["id"], "status": "poweron"}, headers=AUTH)
    assert response.status_code == 200
    assert response.json()["status"] == "poweron"
    assert response.json()["name"] == node["name"]


def test_patch_unknown_node(client):
    response = client.patch("/v1/nodes", json={"id": str(uuid.uuid4()), "status": "poweron"}, headers=AUTH)
    assert response.status_code == 404


def test_put_node(client):
    cluster = create_cluster(client)
    node = create_node(client, cluster["id"])
    node.update(name="renamed", status="poweron")

    response = client.put("/v1/nodes", json=node, headers=AUTH)
    assert response.status_code == 200
    assert response.json()["name"] == "renamed"
    assert response.json()["created_at"] == node["created_at"]


def test_delete_node(client):
    cluster = create_cluster(client)
    node = create_node(client, cluster["id"])

    response = client.delete(f"/v1/nodes/{node['id']}", headers=AUTH)
    assert response.status_code == 200
    assert response.text == node["id"]
    assert client.get(f"/v1/nodes/{node['id']}", headers=AUTH).status_code == 404


def test_get_with_malformed_id(client):
    response = client.get("/v1/nodes/42", headers=AUTH)
    assert response.status_code == 400
