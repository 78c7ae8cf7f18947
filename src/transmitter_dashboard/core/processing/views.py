"""
Presentation views derived from the dashboard stores.
Everything here is recomputed on each call; nothing is cached.
"""
from typing import Dict, List, Optional, Sequence

from transmitter_dashboard.core.models.rolling_history import RollingHistory
from transmitter_dashboard.core.models.sensor_data import SensorSnapshot
from transmitter_dashboard.core.models.sensor_enum import SensorType
from transmitter_dashboard.core.services.selection_store import SelectionStore

LIST_COORD_DECIMALS = 4
DETAIL_COORD_DECIMALS = 6


def transmitter_rows(snapshots: Sequence[SensorSnapshot], selection: SelectionStore) -> List[dict]:
    """One row per transmitter for the list panel, in snapshot order."""
    return [
        {
            "id": s.id,
            "status": s.status.value,
            "lat": round(s.lat, LIST_COORD_DECIMALS),
            "lng": round(s.lng, LIST_COORD_DECIMALS),
            "signal_strength": s.signal_strength,
            "battery": s.battery,
            "sensor_type": s.sensor_type.value,
            "selected": selection.is_selected(s.id),
        }
        for s in snapshots
    ]


def transmitter_detail(snapshots: Sequence[SensorSnapshot], selection: SelectionStore) -> Optional[dict]:
    """
    Detail panel for the selected transmitter.

    Uses the current snapshot when the id is present; otherwise falls back to the
    last snapshot seen for it and flags the result as stale. Returns None when
    nothing is selected, and a data-less stale entry when the id was never seen.
    """
    selected_id = selection.selected_id
    if selected_id is None:
        return None

    current = next((s for s in snapshots if s.id == selected_id), None)
    snapshot = current or selection.last_seen
    detail = {"id": selected_id, "stale": current is None}
    if snapshot is None:
        return detail

    detail.update({
        "lat": round(snapshot.lat, DETAIL_COORD_DECIMALS),
        "lng": round(snapshot.lng, DETAIL_COORD_DECIMALS),
        "signal_strength": snapshot.signal_strength,
        "battery": snapshot.battery,
        "temperature": snapshot.temperature,
        "sensor_type": snapshot.sensor_type.value,
        "status": snapshot.status.value,
        "last_update": snapshot.last_update,
    })
    return detail


def signal_history_series(history: RollingHistory) -> List[Dict[str, object]]:
    """Trend chart input: [{time, avgSignal}] oldest first."""
    return [point.to_chart_row() for point in history.points()]


def type_distribution(snapshots: Sequence[SensorSnapshot]) -> List[Dict[str, object]]:
    """Count of transmitters per sensor type; always one row per type, in enum order."""
    counts = {sensor_type: 0 for sensor_type in SensorType}
    for s in snapshots:
        counts[s.sensor_type] += 1
    return [{"type": sensor_type.value, "count": count} for sensor_type, count in counts.items()]
