from fastapi import APIRouter, Depends, Query

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.models.view_data import PointerEvent, ScreenPoint
from transmitter_dashboard.core.service_manager import get_dashboard
from transmitter_dashboard.core.services.viewport_controller import ViewportController
from transmitter_dashboard.schemas import (
    GeoResponse,
    Offset,
    PointerEventRequest,
    PointerEventResponse,
    ViewportResponse,
)

router = APIRouter(prefix="/viewport", tags=["viewport"])


def _viewport_response(viewport: ViewportController) -> ViewportResponse:
    t = viewport.transform
    return ViewportResponse(
        zoom=t.zoom,
        offset=Offset(x=t.offset_x, y=t.offset_y),
        state=viewport.state,
        zoom_min=viewport.zoom_min,
        zoom_max=viewport.zoom_max,
    )


@router.get("", response_model=ViewportResponse)
async def get_viewport(dashboard: Dashboard = Depends(get_dashboard)) -> ViewportResponse:
    """Current zoom, pan offset and drag state."""
    return _viewport_response(dashboard.viewport)


@router.post("/pointer", response_model=PointerEventResponse)
async def post_pointer_event(
    event: PointerEventRequest, dashboard: Dashboard = Depends(get_dashboard)
) -> PointerEventResponse:
    """
    Feed one pointer event into the pan state machine.

    - **down** starts a drag anchored at (x, y)
    - **move** pans by the distance from the anchor while dragging; ignored otherwise
    - **up** / **leave** end the drag, keeping the last offset

    Events with missing or non-finite coordinates are ignored (`applied: false`), never rejected.
    """
    applied = dashboard.viewport.dispatch(PointerEvent(kind=event.kind, x=event.x, y=event.y))
    state = _viewport_response(dashboard.viewport)
    return PointerEventResponse(applied=applied, **state.model_dump())


@router.post("/zoom/in", response_model=ViewportResponse)
async def zoom_in(dashboard: Dashboard = Depends(get_dashboard)) -> ViewportResponse:
    """Zoom in by the configured factor, clamped to zoom_max. The pan offset is not changed."""
    dashboard.viewport.zoom_in()
    return _viewport_response(dashboard.viewport)


@router.post("/zoom/out", response_model=ViewportResponse)
async def zoom_out(dashboard: Dashboard = Depends(get_dashboard)) -> ViewportResponse:
    """Zoom out by the configured factor, clamped to zoom_min. The pan offset is not changed."""
    dashboard.viewport.zoom_out()
    return _viewport_response(dashboard.viewport)


@router.post("/reset", response_model=ViewportResponse)
async def reset_viewport(dashboard: Dashboard = Depends(get_dashboard)) -> ViewportResponse:
    """Return to zoom 1 and no pan offset."""
    dashboard.viewport.reset()
    return _viewport_response(dashboard.viewport)


@router.get("/geo", response_model=GeoResponse)
async def screen_to_geo(
    x: float = Query(..., description="Screen x in viewport pixels"),
    y: float = Query(..., description="Screen y in viewport pixels"),
    dashboard: Dashboard = Depends(get_dashboard),
) -> GeoResponse:
    """Geographic position under a screen point for the current transform."""
    geo = dashboard.viewport.unproject(ScreenPoint(x, y))
    return GeoResponse(lat=geo.lat, lng=geo.lng)
