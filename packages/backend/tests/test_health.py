"""Health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_degraded_when_database_down(app, client, monkeypatch):
    class DownEngine:
        def connect(self):
            raise ConnectionRefusedError("database is down")

    monkeypatch.setattr(app.state, "engine", DownEngine())
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "degraded"
    assert r.json()["database"] == "error"
