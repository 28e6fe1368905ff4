"""Oscilloscope trace: a bounded history of points with auto-scaling axes."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float


class Oscilloscope:
    """Keeps the most recent points and widens its axes to fit them."""

    def __init__(self, buffer_size: int) -> None:
        self.x_min = self.x_max = 0.0
        self.y_min = self.y_max = 0.0
        self.line_width = 1.0
        self.draw_reverse = True
        self.draw_zero = True
        self.dynamically_resize_x = False
        self.dynamically_resize_y = True
        self._points: deque[DataPoint] = deque()
        self.set_buffer_size(buffer_size)

    @property
    def buffer_size(self) -> int:
        return self._points.maxlen or 0

    def set_buffer_size(self, n: int) -> None:
        if n < 1:
            raise ValueError("buffer size must be at least 1")
        self._points = deque(maxlen=n)

    def reset(self) -> None:
        self._points.clear()

    def add_data_point(self, x: float, y: float) -> None:
        self._points.append(DataPoint(x, y))

        if self.dynamically_resize_y:
            self.y_min, self.y_max = self._widen(y, self.y_min, self.y_max)
        if self.dynamically_resize_x:
            self.x_min, self.x_max = self._widen(x, self.x_min, self.x_max)

    @staticmethod
    def _widen(v: float, lo: float, hi: float) -> tuple[float, float]:
        margin = abs(0.1 * v)
        if v + margin >= hi:
            hi = v + margin
        elif v - margin <= lo:
            lo = v - margin
        return lo, hi

    def points(self) -> list[DataPoint]:
        """Stored points, oldest first."""
        return list(self._points)

    def normalize(self, point: DataPoint) -> tuple[float, float]:
        """Position of ``point`` as fractions of the current axis ranges."""
        x_range = self.x_max - self.x_min
        y_range = self.y_max - self.y_min
        if x_range == 0 or y_range == 0:
            raise ValueError("oscilloscope axis range is empty")
        return (point.x - self.x_min) / x_range, (point.y - self.y_min) / y_range