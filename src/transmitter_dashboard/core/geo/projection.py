"""
Local linear mapping between geographic and viewport coordinates.

    x = origin_x + (lng - ref_lng) * scale + offset_x
    y = origin_y - (lat - ref_lat) * scale + offset_y
    scale = base_scale * zoom

The y term is negated because latitude grows northwards while screen y grows
downwards. This is not a real map projection; it is only accurate close to the
reference point.
"""
from dataclasses import dataclass

from transmitter_dashboard.core.models.config_data import viewportConfigData
from transmitter_dashboard.core.models.view_data import GeoPoint, ScreenPoint, ViewTransform


@dataclass(frozen=True)
class MapProjection:
    """Fixed constants of the mapping. The viewport centre is the screen origin."""
    origin_x: float = 400.0
    origin_y: float = 300.0
    reference_lat: float = 34.0522
    reference_lng: float = -118.2437
    base_scale: float = 10000.0  # pixels per degree at zoom 1

    @classmethod
    def from_config(cls, cfg: viewportConfigData) -> "MapProjection":
        return cls(
            origin_x=cfg.width / 2,
            origin_y=cfg.height / 2,
            reference_lat=cfg.reference_lat,
            reference_lng=cfg.reference_lng,
            base_scale=cfg.base_scale,
        )

    def scale_factor(self, zoom: float) -> float:
        return self.base_scale * zoom


DEFAULT_PROJECTION = MapProjection()


def to_screen(geo: GeoPoint, transform: ViewTransform, projection: MapProjection = DEFAULT_PROJECTION) -> ScreenPoint:
    scale = projection.scale_factor(transform.zoom)
    return ScreenPoint(
        x=projection.origin_x + (geo.lng - projection.reference_lng) * scale + transform.offset_x,
        y=projection.origin_y - (geo.lat - projection.reference_lat) * scale + transform.offset_y,
    )


def to_geo(point: ScreenPoint, transform: ViewTransform, projection: MapProjection = DEFAULT_PROJECTION) -> GeoPoint:
    scale = projection.scale_factor(transform.zoom)
    return GeoPoint(
        lat=projection.reference_lat - (point.y - projection.origin_y - transform.offset_y) / scale,
        lng=projection.reference_lng + (point.x - projection.origin_x - transform.offset_x) / scale,
    )
