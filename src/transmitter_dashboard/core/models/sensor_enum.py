"""Enumerations for type-safe transmitter references."""
from enum import Enum


class SensorType(Enum):
    """Kind of detector fitted to a transmitter."""
    GPR = "GPR"
    ACOUSTIC = "Acoustic"
    ULTRASOUND = "Ultrasound"


class SensorStatus(Enum):
    """Operational status. Exactly two states, no intermediate severities."""
    NORMAL = "Normal"
    ALERT = "Alert"
