"""
Bounded FIFO storage for the signal trend chart.
CircularBuffer gives O(1) append with oldest-first eviction; RollingHistory
layers the {time, avgSignal} point type and the chart-facing accessors on top.
"""
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_HISTORY_WINDOW = 20


class CircularBuffer(Generic[T]):
    """
    Fixed-capacity ring of items.
    - O(1) insertion at the end
    - O(1) random access by logical index (0 = oldest)
    - Overwrites the oldest item when full
    """

    __slots__ = ('capacity', 'buffer', 'write_index', 'count', '_mask')

    def __init__(self, capacity: int):
        """
        Initialize circular buffer.

        Args:
            capacity: Maximum number of items to keep
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer: List[Optional[T]] = [None] * capacity
        self.write_index = 0  # Next position to write
        self.count = 0  # Number of valid entries (0 to capacity)
        # Power-of-2 capacities can wrap with a mask instead of a modulo
        self._mask = capacity - 1 if (capacity & (capacity - 1)) == 0 else None

    def _wrap(self, index: int) -> int:
        if self._mask is not None:
            return index & self._mask
        return index % self.capacity

    def append(self, item: T) -> None:
        """Add an item, evicting the oldest one when full. O(1)."""
        self.buffer[self.write_index] = item
        self.write_index = self._wrap(self.write_index + 1)
        if self.count < self.capacity:
            self.count += 1

    def get(self, index: int) -> T:
        """
        Get item at logical index (0 = oldest, count-1 = newest).
        O(1) access.
        """
        if index < 0 or index >= self.count:
            raise IndexError(f"Index {index} out of range [0, {self.count})")
        return self.buffer[self._wrap(self.write_index - self.count + index)]

    def get_range(self, start_index: int, end_index: int) -> List[T]:
        """Get entries from start_index to end_index (exclusive), oldest first."""
        if start_index < 0 or end_index > self.count or start_index > end_index:
            raise IndexError(f"Invalid range [{start_index}, {end_index}) for buffer of size {self.count}")
        first = self.write_index - self.count
        return [self.buffer[self._wrap(first + i)] for i in range(start_index, end_index)]

    def get_all(self) -> List[T]:
        """Get all valid entries in chronological order."""
        return self.get_range(0, self.count)

    def is_full(self) -> bool:
        """Check if buffer is at capacity."""
        return self.count == self.capacity

    def size(self) -> int:
        """Get number of valid entries."""
        return self.count

    def clear(self) -> None:
        """Clear all entries."""
        self.buffer = [None] * self.capacity
        self.write_index = 0
        self.count = 0


@dataclass(frozen=True)
class HistoryPoint:
    """One aggregate point of the signal trend."""
    time: str
    avg_signal: float
    timestamp: float = 0.0

    def to_chart_row(self) -> dict:
        return {"time": self.time, "avgSignal": self.avg_signal}


class RollingHistory:
    """
    Chronological, bounded sequence of HistoryPoint.
    Length never exceeds `window`; once full, each append evicts the oldest point.
    Stored points are immutable and never reordered.
    """

    __slots__ = ('window', '_buffer')

    def __init__(self, window: int = DEFAULT_HISTORY_WINDOW):
        self.window = window
        self._buffer: CircularBuffer[HistoryPoint] = CircularBuffer(window)

    def append(self, point: HistoryPoint) -> None:
        self._buffer.append(point)

    def points(self) -> List[HistoryPoint]:
        return self._buffer.get_all()

    def latest(self) -> Optional[HistoryPoint]:
        if self._buffer.size() == 0:
            return None
        return self._buffer.get(self._buffer.size() - 1)

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return self._buffer.size()

    def get_stats(self) -> dict:
        """Get statistics about the underlying buffer."""
        return {
            "capacity": self._buffer.capacity,
            "current_count": self._buffer.count,
            "is_full": self._buffer.is_full(),
            "utilization": self._buffer.count / self._buffer.capacity,
        }
