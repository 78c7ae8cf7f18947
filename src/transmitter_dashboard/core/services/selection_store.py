import logging
from typing import Optional, Sequence

from transmitter_dashboard.core.event_hub import TOPIC_SELECTION_CHANGED, TOPIC_SNAPSHOT_REPLACED, EventHub
from transmitter_dashboard.core.models.sensor_data import SensorSnapshot

logger = logging.getLogger(__name__)


class SelectionStore:
    """
    Holds at most one selected transmitter id.

    The selection is never validated against the current snapshot set and is not
    cleared when the transmitter disappears from a later set. The store keeps the
    last snapshot it saw for the selected id so the detail view can keep showing it.
    """

    def __init__(self, event_hub: Optional[EventHub] = None):
        self._selected_id: Optional[str] = None
        self._last_seen: Optional[SensorSnapshot] = None
        self._event_hub = event_hub
        if event_hub is not None:
            event_hub.subscribe(TOPIC_SNAPSHOT_REPLACED, self._on_snapshot_replaced)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def last_seen(self) -> Optional[SensorSnapshot]:
        """Most recent snapshot of the selected transmitter, possibly from an older set."""
        return self._last_seen

    def select(self, sensor_id: str, snapshots: Sequence[SensorSnapshot] = ()):
        """Select `sensor_id`, overwriting any previous selection."""
        if sensor_id != self._selected_id:
            self._last_seen = None
        self._selected_id = sensor_id
        self._remember(snapshots)
        logger.debug(f"Selected transmitter {sensor_id}")
        self._publish()

    def clear(self):
        if self._selected_id is None:
            return
        logger.debug(f"Cleared selection of {self._selected_id}")
        self._selected_id = None
        self._last_seen = None
        self._publish()

    def is_selected(self, sensor_id: str) -> bool:
        return self._selected_id is not None and self._selected_id == sensor_id

    def _remember(self, snapshots: Sequence[SensorSnapshot]) -> bool:
        for snapshot in snapshots:
            if snapshot.id == self._selected_id:
                self._last_seen = snapshot
                return True
        return False

    def _on_snapshot_replaced(self, topic, snapshots: Sequence[SensorSnapshot]):
        if self._selected_id is None:
            return
        if not self._remember(snapshots):
            logger.info(f"Selected transmitter {self._selected_id} is missing from the latest snapshot set")

    def _publish(self):
        if self._event_hub is not None:
            self._event_hub.send_all_on_topic(TOPIC_SELECTION_CHANGED, self._selected_id)
