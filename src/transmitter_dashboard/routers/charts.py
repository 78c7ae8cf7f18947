from fastapi import APIRouter, Depends

from transmitter_dashboard.core.dashboard import Dashboard
from transmitter_dashboard.core.processing.views import signal_history_series, type_distribution
from transmitter_dashboard.core.service_manager import get_dashboard
from transmitter_dashboard.schemas import HistoryPointResponse, HistorySeries, TypeCount, TypeDistribution

router = APIRouter(prefix="/charts", tags=["charts"])


@router.get("/signal-history", response_model=HistorySeries)
async def get_signal_history(dashboard: Dashboard = Depends(get_dashboard)) -> HistorySeries:
    """Average signal strength per feed tick, oldest first, at most `history_window` points."""
    return HistorySeries(list=[HistoryPointResponse(**row) for row in signal_history_series(dashboard.feed.history)])


@router.get("/type-distribution", response_model=TypeDistribution)
async def get_type_distribution(dashboard: Dashboard = Depends(get_dashboard)) -> TypeDistribution:
    """Transmitter count per sensor type (GPR, Acoustic, Ultrasound) in the latest snapshot set."""
    return TypeDistribution(list=[TypeCount(**row) for row in type_distribution(dashboard.feed.snapshots)])
