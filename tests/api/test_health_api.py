"""Health endpoint."""

import pytest


@pytest.mark.asyncio
async def test_health_reports_configuration(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["identityUrlConfigured"] is True
    assert body["identityKeyConfigured"] is True
    assert body["database"] == "ok"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_health_reports_database_down(client, mocker):
    mocker.patch("docvault.api.fastapi.routers.health.db_healthcheck", return_value=False)
    resp = await client.get("/api/health")
    assert resp.json()["database"] == "unavailable"
