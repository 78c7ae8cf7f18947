"""Viewport interaction state enumeration."""
from enum import Enum


class ViewportState(Enum):
    """States of the pan gesture state machine."""
    IDLE = "idle"
    DRAGGING = "dragging"
