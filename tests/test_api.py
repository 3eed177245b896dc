"""Tests for the HTTP gateway over the same dispatcher."""

import json

import pytest
from fastapi.testclient import TestClient

from funkoshelf.api.app import app
from funkoshelf.api.state import AppState, get_state


@pytest.fixture
def client(store):
    state = AppState(store=store)
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_add_and_list(client, make_payload):
    for funko_id in (5, 1, 3):
        r = client.post("/api/funkos/ana", json=make_payload(id=funko_id))
        assert r.status_code == 201
    r = client.get("/api/funkos/ana")
    assert r.status_code == 200
    assert [f["id"] for f in r.json()] == [1, 3, 5]


def test_list_empty(client):
    r = client.get("/api/funkos/nobody")
    assert r.status_code == 200
    assert r.json() == []


def test_duplicate_add_conflict(client, spider_man_payload):
    assert client.post("/api/funkos/ana", json=spider_man_payload).status_code == 201
    r = client.post("/api/funkos/ana", json=spider_man_payload)
    assert r.status_code == 409
    assert "already exists" in r.json()["detail"]


def test_read_round_trip(client, spider_man_payload):
    client.post("/api/funkos/ana", json=spider_man_payload)
    r = client.get("/api/funkos/ana/1")
    assert r.status_code == 200
    assert r.json() == spider_man_payload


def test_read_missing(client):
    assert client.get("/api/funkos/ana/999").status_code == 404


def test_patch_merges_and_keeps_id(client, spider_man_payload):
    client.post("/api/funkos/ana", json=spider_man_payload)
    r = client.patch("/api/funkos/ana/1", json={"id": 77, "name": "Miles"})
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == 1
    assert body["name"] == "Miles"
    assert body["marketValue"] == spider_man_payload["marketValue"]
    assert client.get("/api/funkos/ana/77").status_code == 404


def test_patch_missing(client):
    assert client.patch("/api/funkos/ana/3", json={"name": "x"}).status_code == 404


def test_delete(client, spider_man_payload):
    client.post("/api/funkos/ana", json=spider_man_payload)
    assert client.delete("/api/funkos/ana/1").status_code == 204
    assert client.delete("/api/funkos/ana/1").status_code == 404


def test_invalid_user_name(client):
    assert client.get("/api/funkos/bad%20user").status_code == 400


def test_invalid_body_rejected(client):
    r = client.post("/api/funkos/ana", json={"id": 1})
    assert r.status_code == 422


def test_unencodable_patch_keeps_record(client, spider_man_payload):
    client.post("/api/funkos/ana", json=spider_man_payload)
    r = client.patch(
        "/api/funkos/ana/1",
        content=b'{"name": "\\ud800"}',
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 500
    r = client.get("/api/funkos/ana/1")
    assert r.status_code == 200
    assert r.json() == spider_man_payload


def test_unencodable_add_does_not_block_id(client, make_payload, spider_man_payload):
    body = json.dumps(make_payload(name="PLACEHOLDER")).replace("PLACEHOLDER", "\\ud800")
    r = client.post("/api/funkos/ana", content=body, headers={"content-type": "application/json"})
    assert r.status_code == 500
    assert client.post("/api/funkos/ana", json=spider_man_payload).status_code == 201
    assert client.get("/api/funkos/ana").json() == [spider_man_payload]
