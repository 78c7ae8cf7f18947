import logging
from dataclasses import dataclass
from typing import List, Optional

from transmitter_dashboard.core.models.sensor_enum import SensorStatus
from transmitter_dashboard.core.models.view_data import GeoPoint
from transmitter_dashboard.core.services.selection_store import SelectionStore
from transmitter_dashboard.core.services.telemetry_feed import TelemetryFeed
from transmitter_dashboard.core.services.viewport_controller import ViewportController

logger = logging.getLogger(__name__)

MARKER_RADIUS = 8.0
LABEL_OFFSET_Y = -12.0

STATUS_COLORS = {
    SensorStatus.ALERT: "#ef4444",
    SensorStatus.NORMAL: "#3b82f6",
}


@dataclass(frozen=True)
class Marker:
    id: str
    x: float
    y: float
    status: SensorStatus
    color: str
    label: str
    selected: bool


class MarkerLayer:
    """
    Projects the latest snapshot set through the current view transform.
    Holds no positions of its own: every call recomputes from the feed, the
    viewport and the selection it was given.
    """

    def __init__(self, feed: TelemetryFeed, viewport: ViewportController, selection: SelectionStore):
        self._feed = feed
        self._viewport = viewport
        self._selection = selection

    def markers(self) -> List[Marker]:
        result: List[Marker] = []
        for snapshot in self._feed.snapshots:
            pos = self._viewport.project(GeoPoint(snapshot.lat, snapshot.lng))
            result.append(Marker(
                id=snapshot.id,
                x=pos.x,
                y=pos.y,
                status=snapshot.status,
                color=STATUS_COLORS[snapshot.status],
                label=snapshot.id,
                selected=self._selection.is_selected(snapshot.id),
            ))
        return result

    def hit_test(self, x: float, y: float) -> Optional[Marker]:
        """Topmost marker whose circle contains (x, y). Later markers are drawn on top."""
        for marker in reversed(self.markers()):
            if (marker.x - x) ** 2 + (marker.y - y) ** 2 <= MARKER_RADIUS ** 2:
                return marker
        return None

    def click(self, sensor_id: str):
        self._selection.select(sensor_id, self._feed.snapshots)

    def click_at(self, x: float, y: float) -> Optional[Marker]:
        """Select the marker under the pointer. Clicking empty map leaves the selection alone."""
        marker = self.hit_test(x, y)
        if marker is None:
            logger.debug(f"Map click at ({x}, {y}) hit no marker")
            return None
        self.click(marker.id)
        return marker
