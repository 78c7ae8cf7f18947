import logging
import math
from typing import Optional

from transmitter_dashboard.core.event_hub import TOPIC_TRANSFORM_CHANGED, EventHub
from transmitter_dashboard.core.geo.projection import DEFAULT_PROJECTION, MapProjection, to_geo, to_screen
from transmitter_dashboard.core.models.config_data import viewportConfigData
from transmitter_dashboard.core.models.view_data import (
    DragSession,
    GeoPoint,
    PointerEvent,
    PointerKind,
    ScreenPoint,
    ViewTransform,
)
from transmitter_dashboard.core.models.viewport_state import ViewportState

logger = logging.getLogger(__name__)

DEFAULT_ZOOM_MIN = 0.5
DEFAULT_ZOOM_MAX = 5.0
DEFAULT_ZOOM_FACTOR = 1.2


def _valid_position(x: Optional[float], y: Optional[float]) -> Optional[ScreenPoint]:
    """Return the event position, or None when a coordinate is missing or not finite."""
    if x is None or y is None:
        return None
    try:
        fx, fy = float(x), float(y)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(fx) and math.isfinite(fy)):
        return None
    return ScreenPoint(fx, fy)


class ViewportController:
    """
    Owns the view transform and turns pointer drags and zoom buttons into changes to it.

    States: IDLE and DRAGGING. A drag sets offset = anchor_offset + (pointer - anchor_pointer),
    so the final offset only depends on the last pointer position of the gesture.
    Zooming multiplies or divides by a fixed factor, clamped to [zoom_min, zoom_max],
    and leaves the offset untouched (no recentring on the cursor).

    Malformed events are dropped without touching state; nothing here raises on bad input.
    """

    def __init__(
        self,
        event_hub: Optional[EventHub] = None,
        projection: MapProjection = DEFAULT_PROJECTION,
        zoom_min: float = DEFAULT_ZOOM_MIN,
        zoom_max: float = DEFAULT_ZOOM_MAX,
        zoom_factor: float = DEFAULT_ZOOM_FACTOR,
    ):
        self.projection = projection
        self.zoom_min = zoom_min
        self.zoom_max = zoom_max
        self.zoom_factor = zoom_factor
        self._event_hub = event_hub
        self._transform = ViewTransform()
        self._drag: Optional[DragSession] = None

    @classmethod
    def from_config(cls, cfg: viewportConfigData, event_hub: Optional[EventHub] = None) -> "ViewportController":
        return cls(
            event_hub=event_hub,
            projection=MapProjection.from_config(cfg),
            zoom_min=cfg.zoom_min,
            zoom_max=cfg.zoom_max,
            zoom_factor=cfg.zoom_factor,
        )

    @property
    def transform(self) -> ViewTransform:
        return self._transform

    @property
    def state(self) -> ViewportState:
        return ViewportState.DRAGGING if self._drag is not None else ViewportState.IDLE

    @property
    def drag_session(self) -> Optional[DragSession]:
        return self._drag

    # Pointer events

    def dispatch(self, event: PointerEvent) -> bool:
        """Route a raw pointer event. Returns True if the transform or drag state changed."""
        if event.kind is PointerKind.DOWN:
            return self.pointer_down(event.x, event.y)
        if event.kind is PointerKind.MOVE:
            return self.pointer_move(event.x, event.y)
        if event.kind is PointerKind.UP:
            return self.pointer_up()
        if event.kind is PointerKind.LEAVE:
            return self.pointer_leave()
        return False

    def pointer_down(self, x: Optional[float], y: Optional[float]) -> bool:
        position = _valid_position(x, y)
        if position is None:
            logger.debug(f"Ignoring pointer_down with invalid position ({x}, {y})")
            return False
        # A second pointer_down re-anchors the single session
        self._drag = DragSession(anchor_pointer=position, anchor_offset=self._transform.offset)
        return True

    def pointer_move(self, x: Optional[float], y: Optional[float]) -> bool:
        if self._drag is None:
            return False
        position = _valid_position(x, y)
        if position is None:
            logger.debug(f"Ignoring pointer_move with invalid position ({x}, {y})")
            return False
        anchor = self._drag.anchor_pointer
        base = self._drag.anchor_offset
        self._set_transform(self._transform.with_offset(
            base.x + (position.x - anchor.x),
            base.y + (position.y - anchor.y),
        ))
        return True

    def pointer_up(self) -> bool:
        return self._end_drag()

    def pointer_leave(self) -> bool:
        return self._end_drag()

    def _end_drag(self) -> bool:
        if self._drag is None:
            return False
        self._drag = None
        return True

    # Zoom buttons

    def zoom_in(self) -> ViewTransform:
        return self._apply_zoom(min(self._transform.zoom * self.zoom_factor, self.zoom_max))

    def zoom_out(self) -> ViewTransform:
        return self._apply_zoom(max(self._transform.zoom / self.zoom_factor, self.zoom_min))

    def _apply_zoom(self, zoom: float) -> ViewTransform:
        if zoom != self._transform.zoom:
            self._set_transform(self._transform.with_zoom(zoom))
        return self._transform

    def reset(self) -> ViewTransform:
        """Back to the identity transform, ending any drag in progress."""
        self._drag = None
        self._set_transform(ViewTransform())
        return self._transform

    # Coordinate helpers bound to the current transform

    def project(self, geo: GeoPoint) -> ScreenPoint:
        return to_screen(geo, self._transform, self.projection)

    def unproject(self, point: ScreenPoint) -> GeoPoint:
        return to_geo(point, self._transform, self.projection)

    def _set_transform(self, transform: ViewTransform):
        self._transform = transform
        if self._event_hub is not None:
            self._event_hub.send_all_on_topic(TOPIC_TRANSFORM_CHANGED, transform)
