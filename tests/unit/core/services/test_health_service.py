import pytest

from src.pastenote.core.accounting import ViewCountFlusher
from src.pastenote.core.services.health_service import HealthService


class BrokenSession:
    async def execute(self, stmt):
        raise RuntimeError("no database")


@pytest.mark.asyncio
async def test_healthy_database_without_flusher(test_session):
    status = await HealthService(test_session).get_health_status()
    assert status.status == "healthy"
    assert status.checks["database"]["connected"] is True
    assert status.checks["view_accounting"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_database_down():
    svc = HealthService(BrokenSession())
    db = await svc.check_database_health()
    assert db["connected"] is False
    assert "no database" in db["error"]
    assert (await svc.get_health_status()).status == "unhealthy"


@pytest.mark.asyncio
async def test_stopped_flusher_degrades(test_session, session_factory, view_counter):
    flusher = ViewCountFlusher(view_counter, session_factory, interval_seconds=3600)
    status = await HealthService(test_session, flusher).get_health_status()
    assert status.status == "degraded"
    assert status.checks["view_accounting"]["running"] is False


@pytest.mark.asyncio
async def test_running_flusher(test_session, session_factory, view_counter):
    flusher = ViewCountFlusher(view_counter, session_factory, interval_seconds=3600)
    flusher.start()
    try:
        accounting = HealthService(test_session, flusher).check_view_accounting()
        assert accounting["status"] == "healthy"
        flusher.stats.consecutive_failures = 2
        accounting = HealthService(test_session, flusher).check_view_accounting()
        assert accounting["status"] == "unhealthy"
    finally:
        await flusher.stop()


@pytest.mark.asyncio
async def test_metrics(test_session, make_note, view_counter, session_factory):
    await make_note("m1", views=3)
    await make_note("m2", views=4)
    await make_note("m3", text="", views=100)
    view_counter.increment("m1")
    flusher = ViewCountFlusher(view_counter, session_factory, interval_seconds=3600)

    metrics = await HealthService(test_session, flusher).get_system_metrics()
    assert metrics["notes"] == 2
    assert metrics["stored_views"] == 7
    assert metrics["view_accounting"]["pending_notes"] == 1
    assert metrics["uptime_seconds"] >= 0
