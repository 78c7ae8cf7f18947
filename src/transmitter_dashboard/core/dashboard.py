import logging
from typing import Optional

from transmitter_dashboard.core.event_hub import EventHub
from transmitter_dashboard.core.models.config_data import feedConfigData, viewportConfigData
from transmitter_dashboard.core.processing.marker_layer import MarkerLayer
from transmitter_dashboard.core.services.selection_store import SelectionStore
from transmitter_dashboard.core.services.telemetry_feed import TelemetryFeed
from transmitter_dashboard.core.services.telemetry_source import TelemetrySource
from transmitter_dashboard.core.services.viewport_controller import ViewportController

logger = logging.getLogger(__name__)


class Dashboard:
    """
    One dashboard session: the owner of every piece of mutable view state.

    Each store is created here and handed by reference to the components that
    read it. Mutation goes through the owning component's methods only.
    """

    def __init__(
        self,
        source: TelemetrySource,
        feed_config: Optional[feedConfigData] = None,
        viewport_config: Optional[viewportConfigData] = None,
        blocking_source: bool = False,
        event_hub: Optional[EventHub] = None,
    ):
        feed_config = feed_config or feedConfigData()
        self.viewport_config = viewport_config or viewportConfigData()
        self.event_hub = event_hub or EventHub()
        self.viewport = ViewportController.from_config(self.viewport_config, event_hub=self.event_hub)
        self.selection = SelectionStore(event_hub=self.event_hub)
        self.feed = TelemetryFeed(
            source,
            event_hub=self.event_hub,
            history_window=feed_config.history_window,
            interval_seconds=feed_config.interval_seconds,
            blocking_source=blocking_source,
        )
        self.markers = MarkerLayer(self.feed, self.viewport, self.selection)

    async def start(self):
        """Load a first snapshot set, then start the periodic feed."""
        # A previous stop() left the token cancelled
        self.feed.renew_token()
        if not await self.feed.prime():
            logger.warning("Initial telemetry fetch failed; keeping the current snapshot set until the next tick")
        self.feed.start()

    def stop(self):
        self.feed.stop()
