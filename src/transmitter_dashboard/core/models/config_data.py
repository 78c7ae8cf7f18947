from dataclasses import dataclass, field
from typing import Optional


@dataclass
class feedConfigData:
    interval_seconds: float = 100.0
    history_window: int = 20


@dataclass
class viewportConfigData:
    width: int = 800
    height: int = 600
    zoom_min: float = 0.5
    zoom_max: float = 5.0
    zoom_factor: float = 1.2
    base_scale: float = 10000.0
    reference_lat: float = 34.0522
    reference_lng: float = -118.2437


@dataclass
class emulationConfigData:
    enabled: bool = True
    transmitter_count: int = 5
    seed: Optional[int] = None


@dataclass
class remoteConfigData:
    url: str = ""
    timeout_seconds: float = 5.0


@dataclass
class configData:
    feed: feedConfigData = field(default_factory=feedConfigData)
    viewport: viewportConfigData = field(default_factory=viewportConfigData)
    emulation: emulationConfigData = field(default_factory=emulationConfigData)
    remote: remoteConfigData = field(default_factory=remoteConfigData)
