# External libs
import logging
from typing import Optional

# Internal libs
from transmitter_dashboard.core.config_loader import config_loader
from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.services.telemetry_source import EmulatedTelemetrySource, HttpTelemetrySource

logger = logging.getLogger(__name__)


class ServiceManager:
    """Builds the dashboard session and runs its background feed for the lifetime of the app."""

    def __init__(self):
        self.dashboard: Optional[Dashboard] = None
        self.emulation_mode = True

    def build_dashboard(self, emulation: bool = True) -> Dashboard:
        """
        Create a dashboard wired to the configured telemetry source.
        Args:
            emulation: When True, use the random transmitter generator; otherwise poll the remote gateway.
        """
        viewport_cfg = config_loader.get_viewport_config()
        feed_cfg = config_loader.get_feed_config()

        if emulation:
            emu_cfg = config_loader.get_emulation_config()
            source = EmulatedTelemetrySource(
                transmitter_count=emu_cfg.transmitter_count,
                reference_lat=viewport_cfg.reference_lat,
                reference_lng=viewport_cfg.reference_lng,
                seed=emu_cfg.seed,
            )
            blocking = False
        else:
            remote_cfg = config_loader.get_remote_config()
            # Raises ValueError when no gateway url is configured
            source = HttpTelemetrySource(remote_cfg.url, timeout=remote_cfg.timeout_seconds)
            blocking = True

        self.emulation_mode = emulation
        return Dashboard(source, feed_config=feed_cfg, viewport_config=viewport_cfg, blocking_source=blocking)

    def get_dashboard(self) -> Dashboard:
        if self.dashboard is None:
            self.dashboard = self.build_dashboard(config_loader.get_emulation_mode())
        return self.dashboard

    async def start_services(self, emulation: bool = True):
        """Build the dashboard if needed, load the first snapshot set and start the feed timer."""
        logger.info("Starting background services...")
        if self.dashboard is None or self.emulation_mode != emulation:
            if self.dashboard is not None:
                self.dashboard.stop()
            self.dashboard = self.build_dashboard(emulation)

        await self.dashboard.start()
        logger.info("Background services started")

    def stop_services(self):
        if self.dashboard is None:
            return
        self.dashboard.stop()
        logger.info("Background services stopped")


service_manager = ServiceManager()


def get_dashboard() -> Dashboard:
    """FastAPI dependency returning the active dashboard session."""
    return service_manager.get_dashboard()
