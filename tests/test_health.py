"""Tests for health checks, request ids and the JSON error envelope."""

from __future__ import annotations

from flask.testing import FlaskClient

from hia.store import DomainStore


def test_healthz(client: FlaskClient) -> None:
    body = client.get("/healthz").get_json()
    assert body["status"] == "ok"
    assert body["env"] == "testing"


def test_health_parts(client: FlaskClient, store: DomainStore) -> None:
    store.create_contact("Ada", "Lovelace", "ada@example.com", "volunteering", "Hello there friends")
    body = client.get("/health").get_json()

    parts = body["parts"]
    assert parts["store"]["counts"] == {"accounts": 0, "contacts": 1, "donations": 0}
    assert parts["stripe"]["mode"] == "demo"
    assert parts["openai"]["status"] == "degraded"
    assert body["status"] == "degraded"


def test_ready_tolerates_degraded_unless_strict(client: FlaskClient) -> None:
    assert client.get("/ready").status_code == 200
    assert client.get("/ready?strict=1").status_code == 503


def test_live(client: FlaskClient) -> None:
    assert client.get("/live").get_json()["status"] == "ok"


def test_request_id_echoed(client: FlaskClient) -> None:
    resp = client.get("/healthz", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"
    assert resp.get_json()["request_id"] == "abc123"
    assert "X-Response-Time-ms" in resp.headers


def test_request_id_generated(client: FlaskClient) -> None:
    assert len(client.get("/live").headers["X-Request-ID"]) == 32


def test_api_404_is_json(client: FlaskClient) -> None:
    resp = client.get("/api/nope", headers={"X-Request-ID": "rid-1"})
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["ok"] is False
    assert body["error"]["code"] == 404
    assert body["error"]["request_id"] == "rid-1"


def test_method_not_allowed_is_json(client: FlaskClient) -> None:
    resp = client.get("/api/contact")
    assert resp.status_code == 405
    assert resp.get_json()["error"]["code"] == 405


def test_git_paths_blocked(client: FlaskClient) -> None:
    assert client.get("/.git/config").status_code == 404
