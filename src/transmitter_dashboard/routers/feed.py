from fastapi import APIRouter, Depends

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.service_manager import get_dashboard, service_manager
from transmitter_dashboard.schemas import FeedStatusResponse, TickResponse

router = APIRouter(tags=["feed"])


@router.get("/status", response_model=FeedStatusResponse)
async def get_feed_status(dashboard: Dashboard = Depends(get_dashboard)) -> FeedStatusResponse:
    """Live-update indicator: whether the feed timer runs and how many ticks it has applied or skipped."""
    feed = dashboard.feed
    return FeedStatusResponse(
        running=feed.running,
        emulation=service_manager.emulation_mode,
        interval_seconds=feed.interval_seconds,
        ticks_completed=feed.ticks_completed,
        ticks_skipped=feed.ticks_skipped,
        last_tick_at=feed.last_tick_at,
        transmitter_count=len(feed.snapshots),
        history_length=len(feed.history),
        history_window=feed.history.window,
    )


@router.post("/feed/tick", response_model=TickResponse)
async def trigger_tick(dashboard: Dashboard = Depends(get_dashboard)) -> TickResponse:
    """
    Run one feed cycle now, outside the timer.
    `applied` is false when the source failed or the feed has been stopped.
    """
    feed = dashboard.feed
    applied = await feed.tick()
    return TickResponse(applied=applied, transmitter_count=len(feed.snapshots), history_length=len(feed.history))
