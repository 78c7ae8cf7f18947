import base64
import io

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.processing.map_renderer import render_map_png
from transmitter_dashboard.core.service_manager import get_dashboard
from transmitter_dashboard.schemas import (
    ImageDataResponse,
    MapClickRequest,
    MapClickResponse,
    MarkerList,
    MarkerResponse,
)

router = APIRouter(prefix="/map", tags=["map"])


def _render(dashboard: Dashboard) -> bytes:
    cfg = dashboard.viewport_config
    return render_map_png(dashboard.markers.markers(), width=cfg.width, height=cfg.height)


@router.get("/markers", response_model=MarkerList)
async def get_markers(dashboard: Dashboard = Depends(get_dashboard)) -> MarkerList:
    """
    Marker layer for the current view: one marker per transmitter at its projected
    screen position, coloured by status. Recomputed on every request.
    """
    return MarkerList(list=[
        MarkerResponse(
            id=m.id,
            x=m.x,
            y=m.y,
            status=m.status.value,
            color=m.color,
            label=m.label,
            selected=m.selected,
        )
        for m in dashboard.markers.markers()
    ])


@router.post("/click", response_model=MapClickResponse)
async def click_map(click: MapClickRequest, dashboard: Dashboard = Depends(get_dashboard)) -> MapClickResponse:
    """
    Click on the map at a screen position.
    Selects the marker under the pointer; clicking empty map keeps the current selection.
    """
    marker = dashboard.markers.click_at(click.x, click.y)
    return MapClickResponse(
        hit=marker.id if marker else None,
        selected_id=dashboard.selection.selected_id,
    )


@router.get("/image", response_class=StreamingResponse)
async def get_map_image(dashboard: Dashboard = Depends(get_dashboard)):
    """Current view rendered as PNG (grid, markers, selection highlight)."""
    png_data = _render(dashboard)
    return StreamingResponse(
        io.BytesIO(png_data),
        media_type="image/png",
        headers={"Content-Disposition": "inline; filename=deployment_map.png"}
    )


@router.get("/image/base64", response_model=ImageDataResponse)
async def get_map_image_base64(dashboard: Dashboard = Depends(get_dashboard)) -> ImageDataResponse:
    """
    Current view as a base64 PNG data URI.
    Returns: {"data": "data:image/png;base64,..."}
    """
    base64_data = base64.b64encode(_render(dashboard)).decode('utf-8')
    return ImageDataResponse(data=f"data:image/png;base64,{base64_data}")
