"""Pytest configuration and fixtures for test suite."""

from collections import deque
from typing import Iterable, List, Union

import pytest
from fastapi.testclient import TestClient

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.models.sensor_data import SensorSnapshot
from transmitter_dashboard.core.models.sensor_enum import SensorStatus, SensorType
from transmitter_dashboard.core.service_manager import get_dashboard
from transmitter_dashboard.main import app

REFERENCE_LAT = 34.0522
REFERENCE_LNG = -118.2437


class ScriptedSource:
    """Telemetry source that replays queued results. An Exception in the queue is raised instead."""

    def __init__(self, results: Iterable[Union[List[SensorSnapshot], Exception]] = ()):
        self.results = deque(results)
        self.calls = 0

    def push(self, result: Union[List[SensorSnapshot], Exception]):
        self.results.append(result)

    def __call__(self) -> List[SensorSnapshot]:
        self.calls += 1
        if not self.results:
            return []
        result = self.results.popleft()
        if isinstance(result, Exception):
            raise result
        return result


def build_snapshot(
    sensor_id: str,
    signal: int = 50,
    sensor_type: SensorType = SensorType.GPR,
    status: SensorStatus = SensorStatus.NORMAL,
    lat: float = REFERENCE_LAT,
    lng: float = REFERENCE_LNG,
) -> SensorSnapshot:
    return SensorSnapshot(
        id=sensor_id,
        lat=lat,
        lng=lng,
        signal_strength=signal,
        battery=80,
        temperature=21,
        last_update="12:00:00",
        sensor_type=sensor_type,
        status=status,
    )


@pytest.fixture
def make_snapshot():
    """Factory for SensorSnapshot with sensible defaults."""
    return build_snapshot


@pytest.fixture
def source() -> ScriptedSource:
    return ScriptedSource()


@pytest.fixture
def dashboard(source: ScriptedSource) -> Dashboard:
    """Fresh dashboard session fed by the scripted source (feed timer not started)."""
    return Dashboard(source)


@pytest.fixture
def client(dashboard: Dashboard):
    """API client bound to the test dashboard. Lifespan is not run, so no timer is started."""
    app.dependency_overrides[get_dashboard] = lambda: dashboard
    yield TestClient(app)
    app.dependency_overrides.clear()
