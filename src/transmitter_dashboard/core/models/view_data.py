"""
View transform, drag session and pointer event models.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ViewTransform:
    """
    Current map view: zoom level and pan offset in screen pixels.
    Instances are immutable; the viewport controller swaps in a new one on every change.
    """
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def offset(self) -> ScreenPoint:
        return ScreenPoint(self.offset_x, self.offset_y)

    def with_offset(self, x: float, y: float) -> "ViewTransform":
        return replace(self, offset_x=x, offset_y=y)

    def with_zoom(self, zoom: float) -> "ViewTransform":
        return replace(self, zoom=zoom)


@dataclass(frozen=True)
class DragSession:
    """Anchor captured at pointer-down for an in-progress pan gesture."""
    anchor_pointer: ScreenPoint
    anchor_offset: ScreenPoint
    active: bool = True


class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


@dataclass(frozen=True)
class PointerEvent:
    """
    Raw pointer event as received from the client.
    Coordinates may be missing; consumers decide whether the event is usable.
    """
    kind: PointerKind
    x: Optional[float] = None
    y: Optional[float] = None
