"""Smoke tests for the API blueprint wiring."""

from __future__ import annotations

from tests.helpers.assertions import assert_envelope, assert_problem


def test_health_endpoint(client):
    """Health check should return OK payload."""

    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    data = assert_envelope(resp.get_json(), 200)
    assert data["db"] == "ok"
    assert "version" in data


def test_request_id_is_echoed(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})
    assert resp.headers["X-Request-ID"] == "req-42"


def test_unknown_route_is_problem_json(client):
    body = assert_problem(client.get("/api/v1/nope"), 404, "not_found")
    assert body["detail"] == "Route '/api/v1/nope' not found"


def test_missing_media_is_404(client):
    assert_problem(client.get("/media/avatars/missing.png"), 404, "not_found")
