"""Smoke tests for the non-note endpoints."""


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "pastenote" in resp.json()["message"]


def test_basic_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_health_check(client):
    resp = client.get("/api/health/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["connected"] is True
    assert data["checks"]["view_accounting"]["running"] is True


def test_database_health(client):
    data = client.get("/api/health/database").json()
    assert data["status"] == "healthy"


def test_metrics(client):
    data = client.get("/api/health/metrics").json()
    assert data["notes"] == 0
    assert "view_accounting" in data


def test_terms_of_service(client):
    resp = client.get("/api/tos")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "TOS"
    assert "<h1" in data["content"]


def test_terms_of_service_missing(client, test_settings, tmp_path):
    test_settings.tos_file = str(tmp_path / "missing.md")
    assert client.get("/api/tos").status_code == 404


def test_unknown_route(client):
    assert client.get("/api/nothing/here").status_code == 404
