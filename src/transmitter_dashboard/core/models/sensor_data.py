"""
Transmitter snapshot model.
"""

from dataclasses import dataclass
from typing import Any, Dict

from transmitter_dashboard.core.models.sensor_enum import SensorStatus, SensorType

GAUGE_MIN = 0
GAUGE_MAX = 100


def clamp_gauge(value: float) -> int:
    """Clamp a percentage gauge to [0, 100] and truncate it to an int."""
    return int(max(GAUGE_MIN, min(GAUGE_MAX, value)))


@dataclass(frozen=True)
class SensorSnapshot:
    """
    State of one transmitter at one point in time.
    Produced wholesale by the telemetry feed and never mutated afterwards.
    """
    id: str
    lat: float
    lng: float
    signal_strength: int
    battery: int
    temperature: int
    last_update: str
    sensor_type: SensorType
    status: SensorStatus

    @property
    def is_alert(self) -> bool:
        return self.status is SensorStatus.ALERT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SensorSnapshot":
        """
        Build a snapshot from a telemetry payload.
        Accepts both snake_case and the camelCase keys used by the web client
        (signalStrength, lastUpdate, type). Gauges are clamped to their ranges.
        Raises KeyError / ValueError on missing or invalid fields.
        """
        signal = data["signal_strength"] if "signal_strength" in data else data["signalStrength"]
        last_update = data.get("last_update", data.get("lastUpdate", ""))
        raw_type = data.get("sensor_type", data.get("type"))
        return cls(
            id=str(data["id"]),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            signal_strength=clamp_gauge(float(signal)),
            battery=clamp_gauge(float(data["battery"])),
            temperature=int(data["temperature"]),
            last_update=str(last_update),
            sensor_type=SensorType(raw_type),
            status=SensorStatus(data.get("status", SensorStatus.NORMAL.value)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lat": self.lat,
            "lng": self.lng,
            "signalStrength": self.signal_strength,
            "battery": self.battery,
            "temperature": self.temperature,
            "lastUpdate": self.last_update,
            "type": self.sensor_type.value,
            "status": self.status.value,
        }
