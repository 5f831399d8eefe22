import pytest

from omx_remote.health import HealthReporter


@pytest.mark.asyncio
async def test_health_reporter_snapshot():
    reporter = HealthReporter()

    await reporter.update("player", True, "installed")
    await reporter.update("dispatcher", False, "stopped")

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "degraded"
    component_list = snapshot.get("components", [])
    assert isinstance(component_list, list)
    components = {item["name"]: item for item in component_list}
    assert components["player"]["healthy"] is True
    assert components["player"]["detail"] == "installed"
    assert components["dispatcher"]["healthy"] is False


@pytest.mark.asyncio
async def test_health_reporter_latest_update_wins():
    reporter = HealthReporter()

    await reporter.update("http", False, "bind failed")
    await reporter.update("http", True)

    snapshot = await reporter.snapshot()

    assert snapshot["status"] == "ok"
    assert len(snapshot["components"]) == 1


@pytest.mark.asyncio
async def test_health_reporter_empty_is_ok():
    snapshot = await HealthReporter().snapshot()

    assert snapshot == {"status": "ok", "components": []}
