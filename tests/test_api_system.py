"""Tests for the open endpoints, the bearer gate and CORS."""
import uuid

import pytest

from conftest import AUTH

GUARDED = [
    ("get", "/v1/clusters"),
    ("get", f"/v1/clusters/{uuid.uuid4()}"),
    ("post", "/v1/clusters"),
    ("put", "/v1/clusters"),
    ("delete", f"/v1/clusters/{uuid.uuid4()}"),
    ("get", "/v1/nodes"),
    ("get", f"/v1/nodes/{uuid.uuid4()}"),
    ("post", "/v1/nodes"),
    ("patch", "/v1/nodes"),
    ("put", "/v1/nodes"),
    ("delete", f"/v1/nodes/{uuid.uuid4()}"),
    ("post", "/v1/operations/poweron"),
    ("post", "/v1/operations/poweroff"),
    ("post", "/v1/operations/reboot"),
]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.content == b""


def test_features(client):
    response = client.get("/v1/features")
    assert response.status_code == 200
    assert response.json() == ["Feature 1", "Feature 2"]


@pytest.mark.parametrize("method, path", GUARDED)
def test_missing_bearer_is_rejected(client, method, path):
    response = client.request(method, path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"].startswith("Bearer")


@pytest.mark.parametrize("method, path", GUARDED)
def test_wrong_bearer_is_rejected(client, method, path):
    response = client.request(method, path, headers={"Authorization": "Bearer im_not_a_valid_user"})
    assert response.status_code == 401


def test_non_bearer_scheme_is_rejected(client):
    response = client.get("/v1/clusters", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_valid_bearer_is_accepted(client):
    assert client.get("/v1/clusters", headers=AUTH).status_code == 200


@pytest.mark.parametrize("path", ["/health", "/v1/features"])
def test_open_endpoints_ignore_authorization(client, path):
    assert client.get(path).status_code == 200
    assert client.get(path, headers={"Authorization": "Bearer garbage"}).status_code == 200


def test_cors_preflight_methods(client):
    response = client.options(
        "/v1/nodes",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "PATCH",
        },
    )
    assert response.status_code == 200
    allowed = {m.strip() for m in response.headers["access-control-allow-methods"].split(",")}
    assert allowed == {"GET", "POST", "PUT", "PATCH", "DELETE"}
