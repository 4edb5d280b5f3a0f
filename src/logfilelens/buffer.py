"""Bounded look-behind buffer for leading context lines."""

from collections import deque
from collections.abc import Iterator


class LookBehindBuffer:
    """Holds the most recent non-matching lines, oldest first.

    Never holds more than ``capacity`` lines. Appending to a full buffer
    silently evicts the oldest line.
    """

    def __init__(self, capacity: int):
        """Initialize the buffer.

        Args:
            capacity: Maximum number of lines retained (0 retains nothing)
        """
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._lines: deque[str] = deque(maxlen=capacity)

    def append(self, line: str) -> None:
        """Add a line, evicting the oldest one if at capacity."""
        self._lines.append(line)

    def drain(self) -> Iterator[str]:
        """Remove and yield every buffered line, oldest first."""
        while self._lines:
            yield self._lines.popleft()

    def clear(self) -> None:
        """Remove all lines."""
        self._lines.clear()

    @property
    def is_full(self) -> bool:
        """True once the buffer holds ``capacity`` lines (always true for capacity 0)."""
        return len(self._lines) >= self.capacity

    def __iter__(self) -> Iterator[str]:
        """Iterate over buffered lines without removing them."""
        return iter(self._lines)

    def __len__(self) -> int:
        """Return the number of buffered lines."""
        return len(self._lines)
