"""Ignition module: decides when each cylinder's spark plug fires."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

_FOUR_PI = 4 * math.pi
_DEFAULT_REV_LIMIT = 6000.0 * 2 * math.pi / 60.0


class Crankshaft(Protocol):
    """What the ignition module needs from a crankshaft."""

    v_theta: float

    def cycle_angle(self) -> float: ...


class TimingCurve(Protocol):
    """Spark advance as a function of crankshaft speed."""

    def sample_triangle(self, x: float) -> float: ...


@dataclass
class SparkPlug:
    angle: float = 0.0
    ignition_event: bool = False
    enabled: bool = False


class IgnitionModule:
    """Fires spark plugs as the crankshaft sweeps past their timing angles."""

    def __init__(
        self,
        cylinder_count: int,
        crankshaft: Crankshaft,
        timing_curve: TimingCurve,
        rev_limit: float = _DEFAULT_REV_LIMIT,
        limiter_duration: float = 0.5,
    ) -> None:
        if cylinder_count < 1:
            raise ValueError("cylinder_count must be at least 1")
        self.plugs = [SparkPlug() for _ in range(cylinder_count)]
        self.crankshaft = crankshaft
        self.timing_curve = timing_curve
        self.rev_limit = rev_limit
        self.limiter_duration = limiter_duration
        self.enabled = False
        self.rev_limit_timer = 0.0
        self.last_crankshaft_angle = 0.0

    @property
    def cylinder_count(self) -> int:
        return len(self.plugs)

    def set_firing_order(self, cylinder_index: int, angle: float) -> None:
        if not 0 <= cylinder_index < self.cylinder_count:
            raise IndexError(f"cylinder index {cylinder_index} out of range")
        plug = self.plugs[cylinder_index]
        plug.angle = angle
        plug.enabled = True

    def reset(self) -> None:
        self.last_crankshaft_angle = self.crankshaft.cycle_angle()
        self.reset_ignition_events()

    def update(self, dt: float) -> None:
        cycle_angle = self.crankshaft.cycle_angle()
        v_theta = self.crankshaft.v_theta

        if v_theta < 0 and self.enabled and self.rev_limit_timer == 0:
            advance = self.timing_advance()
            r0 = self.last_crankshaft_angle
            wrapped = cycle_angle < r0
            r1 = cycle_angle + _FOUR_PI if wrapped else cycle_angle

            for plug in self.plugs:
                adjusted = (plug.angle - advance) % _FOUR_PI
                if wrapped:
                    adjusted += _FOUR_PI
                if r0 <= adjusted < r1:
                    plug.ignition_event = plug.enabled

        self.rev_limit_timer -= dt
        if abs(v_theta) > self.rev_limit:
            self.rev_limit_timer = self.limiter_duration
        if self.rev_limit_timer < 0:
            self.rev_limit_timer = 0.0

        self.last_crankshaft_angle = cycle_angle

    def get_ignition_event(self, index: int) -> bool:
        return self.plugs[index].ignition_event

    def reset_ignition_events(self) -> None:
        for plug in self.plugs:
            plug.ignition_event = False

    def timing_advance(self) -> float:
        return self.timing_curve.sample_triangle(-self.crankshaft.v_theta)

    def plug(self, i: int) -> SparkPlug:
        """Plug for cylinder ``i``, wrapping around the cylinder count."""
        return self.plugs[i % self.cylinder_count]