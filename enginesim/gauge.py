"""Dial gauge model: needle dynamics, tick layout and colour bands."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

_INT_MAX = 2**31 - 1


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan


@dataclass
class Band:
    color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)
    start: float = 0.0
    end: float = 0.0
    width: float = 0.0
    radial_offset: float = 0.0
    shorten_start: float = 0.0
    shorten_end: float = 0.0


@dataclass(frozen=True)
class Tick:
    offset: int
    value: int
    angle: float
    major: bool
    length: float
    width: float
    labelled: bool


@dataclass
class Gauge:
    """A dial whose needle follows ``value`` through a damped spring."""

    value: float = 0.0
    theta_min: float = math.pi
    theta_max: float = 0.0
    min: int = 0
    max: int = 0
    max_minor_tick: int = _INT_MAX
    gamma: float = 1.0
    minor_step: int = 1
    major_step: int = 10
    minor_tick_width: float = 1.0
    major_tick_width: float = 2.0
    minor_tick_length: float = 5.0
    major_tick_length: float = 10.0
    outer_radius: float = 0.0
    needle_inner_radius: float = 0.0
    needle_outer_radius: float = 0.0
    needle_width: float = 1.0
    needle_max_velocity: float = 2.0
    needle_ks: float = 1000.0
    needle_kd: float = 25.0
    render_text: bool = False
    center: tuple[float, float] = (0.0, 0.0)
    needle_position: float = 0.0
    needle_velocity: float = 0.0
    bands: list[Band] = field(default_factory=list)

    @property
    def span(self) -> int:
        span = abs(self.max - self.min)
        if span == 0:
            raise ValueError("gauge range is empty")
        return span

    def _fraction(self, value: float) -> float:
        return _pow((value - self.min) / self.span, self.gamma)

    def _interpolate(self, s: float) -> float:
        return s * self.theta_max + (1 - s) * self.theta_min

    def update(self, dt: float) -> None:
        value = max(float(self.min), min(float(self.max), float(self.value)))
        target = self._fraction(value)
        force = (
            self.needle_ks * (target - self.needle_position)
            - self.needle_kd * self.needle_velocity
        )
        limit = self.needle_max_velocity
        self.needle_velocity = min(limit, max(self.needle_velocity + force * dt, -limit))
        self.needle_position += self.needle_velocity * dt
        self.needle_position = max(0.0, min(1.0, self.needle_position))

    def angle_at(self, value: float) -> float:
        """Dial angle at which ``value`` sits."""
        return self._interpolate(self._fraction(value))

    def needle_angle(self) -> float:
        return self._interpolate(self.needle_position)

    def ticks(self) -> list[Tick]:
        """Ticks that are drawn, from the start of the scale to its end."""
        result = []
        for offset in range(0, self.span + 1, self.minor_step):
            major = offset % self.major_step == 0
            if not major and offset + self.minor_step > self.max_minor_tick:
                continue
            result.append(
                Tick(
                    offset=offset,
                    value=self.min + offset,
                    angle=self._interpolate(_pow(offset / self.span, self.gamma)),
                    major=major,
                    length=self.major_tick_length if major else self.minor_tick_length,
                    width=self.major_tick_width if major else self.minor_tick_width,
                    labelled=major and self.render_text,
                )
            )
        return result

    def band_angles(self, band: Band) -> tuple[float, float]:
        """Start and end angle of the arc that draws ``band``."""
        a0 = self.angle_at(band.start)
        a1 = self.angle_at(band.end)
        return min(a0, a1) + band.shorten_end, max(a0, a1) - band.shorten_start