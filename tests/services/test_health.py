"""Health probes — liveness always answers; readiness follows the database."""

import obscura.infrastructure.database as db_module
from obscura.main import app


async def test_liveness(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["version"] == app.version


async def test_readiness_with_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)

    res = await client.get("/api/health/ready")

    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
