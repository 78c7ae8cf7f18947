import asyncio
import inspect
import logging
import time
from typing import Iterable, Optional, Tuple

from transmitter_dashboard.core.event_hub import TOPIC_HISTORY_APPENDED, TOPIC_SNAPSHOT_REPLACED, EventHub
from transmitter_dashboard.core.models.rolling_history import DEFAULT_HISTORY_WINDOW, HistoryPoint, RollingHistory
from transmitter_dashboard.core.models.sensor_data import SensorSnapshot
from transmitter_dashboard.core.services.telemetry_source import TelemetrySource, TelemetrySourceError, display_time

logger = logging.getLogger(__name__)

DEFAULT_FEED_INTERVAL = 100.0  # seconds between ticks


class CancellationToken:
    """Handed to one run of the feed loop; once cancelled, that run commits nothing more."""

    __slots__ = ('_cancelled',)

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def average_signal(snapshots: Iterable[SensorSnapshot]) -> Optional[float]:
    """Mean signal strength, or None for an empty set."""
    values = [s.signal_strength for s in snapshots]
    if not values:
        return None
    return sum(values) / len(values)


class TelemetryFeed:
    """
    Periodic telemetry feed.

    On every tick a new snapshot set is fetched from the source, swapped in as a
    whole, and its mean signal strength appended to a bounded rolling history.
    A failing source skips the tick and leaves the previous set and history as
    they were. An empty set replaces the held set but appends no history point.
    """

    def __init__(
        self,
        source: TelemetrySource,
        event_hub: Optional[EventHub] = None,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        interval_seconds: float = DEFAULT_FEED_INTERVAL,
        blocking_source: bool = False,
    ):
        self.source = source
        self.interval_seconds = interval_seconds
        self.blocking_source = blocking_source
        self.history = RollingHistory(history_window)
        self._event_hub = event_hub
        self._snapshots: Tuple[SensorSnapshot, ...] = ()
        self._token = CancellationToken()
        self._task: Optional[asyncio.Task] = None
        self.ticks_completed = 0
        self.ticks_skipped = 0
        self.last_tick_at: Optional[float] = None

    @property
    def snapshots(self) -> Tuple[SensorSnapshot, ...]:
        """Latest complete snapshot set. Replaced as a whole, never modified in place."""
        return self._snapshots

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def token(self) -> CancellationToken:
        return self._token

    def renew_token(self) -> CancellationToken:
        """Issue a fresh token after a stop so the next run can commit again. Kept as is while running."""
        if self._token.cancelled and not self.running:
            self._token = CancellationToken()
        return self._token

    def start(self):
        if self.running:
            return
        self.renew_token()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._process_loop(self._token))
        logger.info(f"TelemetryFeed started (interval {self.interval_seconds}s, window {self.history.window})")

    def stop(self):
        """Cancel the timer. Ticks still awaiting their source commit nothing afterwards."""
        self._token.cancel()
        if self._task:
            self._task.cancel()
            self._task = None
        logger.info("TelemetryFeed stopped")

    async def prime(self) -> bool:
        """Load an initial snapshot set without adding a history point."""
        token = self._token
        snapshots = await self._fetch()
        if snapshots is None or token.cancelled:
            return False
        self._replace(snapshots)
        return True

    async def tick(self) -> bool:
        """Run one feed cycle. Returns False if the tick was skipped."""
        token = self._token
        snapshots = await self._fetch()
        if token.cancelled:
            logger.debug("Discarding telemetry fetched after the feed was stopped")
            return False
        if snapshots is None:
            self.ticks_skipped += 1
            return False
        self.ingest(snapshots)
        return True

    def ingest(self, snapshots: Iterable[SensorSnapshot]) -> Optional[HistoryPoint]:
        """
        Commit a snapshot set as the result of one tick.
        Returns the appended history point, or None when the set was empty or rejected.
        A set with duplicate ids is rejected and counted as a skipped tick.
        """
        if self._token.cancelled:
            return None
        snapshot_set = tuple(snapshots)
        try:
            self._check_unique_ids(snapshot_set)
        except TelemetrySourceError as e:
            logger.warning(f"Rejecting snapshot set: {e}")
            self.ticks_skipped += 1
            return None
        self._replace(snapshot_set)

        now = time.time()
        self.ticks_completed += 1
        self.last_tick_at = now

        avg = average_signal(snapshot_set)
        if avg is None:
            logger.debug("Empty snapshot set, no history point for this tick")
            return None

        point = HistoryPoint(time=display_time(), avg_signal=avg, timestamp=now)
        self.history.append(point)
        if self._event_hub is not None:
            self._event_hub.send_all_on_topic(TOPIC_HISTORY_APPENDED, point)
        return point

    def _replace(self, snapshots: Tuple[SensorSnapshot, ...]):
        # Single assignment: readers see either the old set or the new one
        self._snapshots = tuple(snapshots)
        if self._event_hub is not None:
            self._event_hub.send_all_on_topic(TOPIC_SNAPSHOT_REPLACED, self._snapshots)

    async def _fetch(self) -> Optional[Tuple[SensorSnapshot, ...]]:
        """Ask the source for a set. Any failure is logged and reported as None."""
        try:
            if self.blocking_source:
                result = await asyncio.to_thread(self.source)
            else:
                result = self.source()
            if inspect.isawaitable(result):
                result = await result
            if result is None:
                raise TelemetrySourceError("Source returned no snapshot set")
            snapshots = tuple(result)
            self._check_unique_ids(snapshots)
            return snapshots
        except asyncio.CancelledError:
            raise
        except TelemetrySourceError as e:
            logger.warning(f"Skipping telemetry tick: {e}")
        except Exception as e:
            logger.warning(f"Skipping telemetry tick, source raised {type(e).__name__}: {e}")
        return None

    @staticmethod
    def _check_unique_ids(snapshots: Tuple[SensorSnapshot, ...]):
        seen = set()
        for snapshot in snapshots:
            if not isinstance(snapshot, SensorSnapshot):
                raise TelemetrySourceError(f"Source produced {type(snapshot).__name__}, expected SensorSnapshot")
            if snapshot.id in seen:
                raise TelemetrySourceError(f"Duplicate transmitter id {snapshot.id} in snapshot set")
            seen.add(snapshot.id)

    async def _process_loop(self, token: CancellationToken):
        interval = self.interval_seconds
        while not token.cancelled:
            start_loop = time.monotonic()
            await asyncio.sleep(interval)
            if token.cancelled:
                break
            await self.tick()
            logger.debug(f"Telemetry tick took {time.monotonic() - start_loop - interval:.3f}s")
