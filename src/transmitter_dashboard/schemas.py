from typing import Any, List, Optional

from pydantic import BaseModel, Field

from transmitter_dashboard.core.models.view_data import PointerKind
from transmitter_dashboard.core.models.viewport_state import ViewportState


class AppHealthOK(BaseModel):
    status: str
    app: str


class FeedStatusResponse(BaseModel):
    running: bool
    emulation: bool
    interval_seconds: float
    ticks_completed: int
    ticks_skipped: int
    last_tick_at: Optional[float] = None
    transmitter_count: int
    history_length: int
    history_window: int


class TickResponse(BaseModel):
    applied: bool
    transmitter_count: int
    history_length: int


class TransmitterRow(BaseModel):
    id: str
    status: str
    lat: float
    lng: float
    signal_strength: int
    battery: int
    sensor_type: str
    selected: bool


class TransmitterList(BaseModel):
    list: List[TransmitterRow]


class TransmitterDetail(BaseModel):
    id: str
    stale: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    signal_strength: Optional[int] = None
    battery: Optional[int] = None
    temperature: Optional[int] = None
    sensor_type: Optional[str] = None
    status: Optional[str] = None
    last_update: Optional[str] = None


class SelectionResponse(BaseModel):
    selected_id: Optional[str] = None


class Offset(BaseModel):
    x: float
    y: float


class ViewportResponse(BaseModel):
    zoom: float
    offset: Offset
    state: ViewportState
    zoom_min: float
    zoom_max: float


class PointerEventRequest(BaseModel):
    """
    Pointer event forwarded by the client.
    Coordinates are accepted as sent; missing, non-numeric or non-finite values make
    the event a no-op instead of a validation error.
    """
    kind: PointerKind
    x: Optional[Any] = Field(default=None, description="Screen x in viewport pixels")
    y: Optional[Any] = Field(default=None, description="Screen y in viewport pixels")


class PointerEventResponse(ViewportResponse):
    applied: bool


class GeoResponse(BaseModel):
    lat: float
    lng: float


class MarkerResponse(BaseModel):
    id: str
    x: float
    y: float
    status: str
    color: str
    label: str
    selected: bool


class MarkerList(BaseModel):
    list: List[MarkerResponse]


class MapClickRequest(BaseModel):
    x: float
    y: float


class MapClickResponse(BaseModel):
    hit: Optional[str] = None
    selected_id: Optional[str] = None


class HistoryPointResponse(BaseModel):
    time: str
    avgSignal: float


class HistorySeries(BaseModel):
    list: List[HistoryPointResponse]


class TypeCount(BaseModel):
    type: str
    count: int = Field(ge=0)


class TypeDistribution(BaseModel):
    list: List[TypeCount]


class ImageDataResponse(BaseModel):
    data: str
