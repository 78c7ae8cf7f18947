"""
Telemetry sources: anything callable that returns a list of SensorSnapshot.

EmulatedTelemetrySource stands in for real hardware and produces random but
well-formed transmitters around the reference point. HttpTelemetrySource polls
a JSON endpoint of a real gateway. Both raise TelemetrySourceError when they
cannot produce a snapshot set.
"""
import datetime
import logging
import random
from typing import Awaitable, Callable, List, Optional, Union

import requests

from transmitter_dashboard.core.models.sensor_data import SensorSnapshot, clamp_gauge
from transmitter_dashboard.core.models.sensor_enum import SensorStatus, SensorType

logger = logging.getLogger(__name__)

SnapshotSet = List[SensorSnapshot]
TelemetrySource = Callable[[], Union[SnapshotSet, Awaitable[SnapshotSet]]]

# Transmitters are scattered within +/- half of this many degrees of the reference point
POSITION_SPREAD_DEG = 0.05
ALERT_PROBABILITY = 0.2


class TelemetrySourceError(RuntimeError):
    """Raised when a source cannot deliver a snapshot set for a tick."""


def display_time(now: Optional[datetime.datetime] = None) -> str:
    return (now or datetime.datetime.now()).strftime("%H:%M:%S")


class EmulatedTelemetrySource:
    """
    Random transmitter generator used in emulation mode.
    Produces TX-1..TX-N on every call with fresh positions and gauges.
    """

    def __init__(
        self,
        transmitter_count: int = 5,
        reference_lat: float = 34.0522,
        reference_lng: float = -118.2437,
        seed: Optional[int] = None,
    ):
        self.transmitter_count = transmitter_count
        self.reference_lat = reference_lat
        self.reference_lng = reference_lng
        self._rng = random.Random(seed)

    def __call__(self) -> SnapshotSet:
        rng = self._rng
        now = display_time()
        types = list(SensorType)
        snapshots: SnapshotSet = []
        for i in range(self.transmitter_count):
            snapshots.append(SensorSnapshot(
                id=f"TX-{i + 1}",
                lat=self.reference_lat + (rng.random() - 0.5) * POSITION_SPREAD_DEG,
                lng=self.reference_lng + (rng.random() - 0.5) * POSITION_SPREAD_DEG,
                signal_strength=clamp_gauge(rng.random() * 100),
                battery=clamp_gauge(rng.random() * 100),
                temperature=int(rng.random() * 30 + 10),
                last_update=now,
                sensor_type=types[int(rng.random() * len(types))],
                status=SensorStatus.ALERT if rng.random() > 1 - ALERT_PROBABILITY else SensorStatus.NORMAL,
            ))
        return snapshots


class HttpTelemetrySource:
    """
    Polls a gateway that serves the current transmitter list as JSON.

    The payload is either a list of transmitter objects or {"transmitters": [...]}.
    This is a blocking call; the feed loop runs it in a worker thread.
    """

    def __init__(self, url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        if not url:
            raise ValueError("HttpTelemetrySource requires a url")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self) -> SnapshotSet:
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise TelemetrySourceError(f"Telemetry fetch from {self.url} failed: {e}") from e
        except ValueError as e:
            raise TelemetrySourceError(f"Telemetry response from {self.url} is not JSON: {e}") from e

        if isinstance(payload, dict):
            payload = payload.get("transmitters")
        if not isinstance(payload, list):
            raise TelemetrySourceError(f"Unexpected telemetry payload shape from {self.url}")

        try:
            return [SensorSnapshot.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise TelemetrySourceError(f"Malformed transmitter record from {self.url}: {e}") from e
