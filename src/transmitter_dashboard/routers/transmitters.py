from fastapi import APIRouter, Depends, Response

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.processing.views import transmitter_detail, transmitter_rows
from transmitter_dashboard.core.service_manager import get_dashboard
from transmitter_dashboard.schemas import SelectionResponse, TransmitterDetail, TransmitterList, TransmitterRow

router = APIRouter(prefix="/transmitters", tags=["transmitters"])


@router.get("", response_model=TransmitterList)
async def list_transmitters(dashboard: Dashboard = Depends(get_dashboard)) -> TransmitterList:
    """
    List view of the latest snapshot set, in feed order.
    Coordinates are rounded to 4 decimals; the selected row carries `selected: true`.
    """
    rows = transmitter_rows(dashboard.feed.snapshots, dashboard.selection)
    return TransmitterList(list=[TransmitterRow(**row) for row in rows])


@router.get("/selected", response_model=TransmitterDetail, responses={
    204: {"description": "No transmitter is selected."}
})
async def get_selected_transmitter(dashboard: Dashboard = Depends(get_dashboard)):
    """
    Detail panel for the selected transmitter.

    If the transmitter is no longer part of the latest snapshot set the last known
    values are returned with `stale: true`. The selection is never cleared automatically.
    """
    detail = transmitter_detail(dashboard.feed.snapshots, dashboard.selection)
    if detail is None:
        return Response(status_code=204)
    return TransmitterDetail(**detail)


@router.put("/{sensor_id}/select", response_model=SelectionResponse)
async def select_transmitter(sensor_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> SelectionResponse:
    """
    Select a transmitter from the list. Any previous selection is replaced.
    The id is not checked against the current snapshot set.
    """
    dashboard.selection.select(sensor_id, dashboard.feed.snapshots)
    return SelectionResponse(selected_id=dashboard.selection.selected_id)


@router.delete("/selected", response_model=SelectionResponse)
async def clear_selection(dashboard: Dashboard = Depends(get_dashboard)) -> SelectionResponse:
    """Close the detail panel."""
    dashboard.selection.clear()
    return SelectionResponse(selected_id=None)
