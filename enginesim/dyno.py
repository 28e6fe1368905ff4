"""Dynamometer readouts: smoothed power figures, status lights and panel text."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

_POWER_RC = 1.0
_STATUS_RC = 0.08
_HP_CONSTANT = 5252.0

_STATUS_ON = 1.0
_STATUS_OFF = 0.01
_HOLD_WITHOUT_DYNO = 0.25

_LITRE = 0.001
_CUBIC_CENTIMETRE = 1e-6
_CUBIC_INCH = 1.6387064e-5


def _alpha(dt: float, rc: float) -> float:
    return dt / (dt + rc)


@dataclass
class PowerTracker:
    """Low-pass filtered torque and horsepower with their peaks and the rpm they occurred at."""

    filtered_torque: float = 0.0
    filtered_horsepower: float = 0.0
    peak_torque: float = 0.0
    peak_torque_rpm: float = 0.0
    peak_horsepower: float = 0.0
    peak_horsepower_rpm: float = 0.0

    def update(self, dt: float, torque: float, rpm: float) -> None:
        """Fold in a torque reading in lb-ft taken at ``rpm``."""
        alpha = _alpha(dt, _POWER_RC)
        hp = torque * rpm / _HP_CONSTANT

        self.filtered_torque = (1 - alpha) * self.filtered_torque + alpha * torque
        self.filtered_horsepower = (1 - alpha) * self.filtered_horsepower + alpha * hp

        if self.filtered_torque > self.peak_torque:
            self.peak_torque = self.filtered_torque
            self.peak_torque_rpm = rpm

        if self.filtered_horsepower > self.peak_horsepower:
            self.peak_horsepower = self.filtered_horsepower
            self.peak_horsepower_rpm = rpm

    def summary(self) -> str:
        """One-line report of the peak horsepower and torque."""
        return (
            f"{self.peak_horsepower:.0f}HP @ {self.peak_horsepower_rpm:.0f}rpm"
            f" | {self.peak_torque:.0f}lb-ft @ {self.peak_torque_rpm:.0f}rpm"
        )


@dataclass
class StatusLights:
    """Four indicator lights (ignition, starter, dyno, hold) that fade towards their state."""

    levels: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])

    @staticmethod
    def _targets(ignition: bool, starter: bool, dyno: bool, hold: bool) -> list[float]:
        if hold:
            hold_level = _STATUS_ON if dyno else _HOLD_WITHOUT_DYNO
        else:
            hold_level = _STATUS_OFF
        return [
            _STATUS_ON if ignition else _STATUS_OFF,
            _STATUS_ON if starter else _STATUS_OFF,
            _STATUS_ON if dyno else _STATUS_OFF,
            hold_level,
        ]

    def update(self, dt: float, statuses: Iterable[bool]) -> None:
        """Move each light towards the state of ignition, starter, dyno and hold."""
        states = list(statuses)
        if len(states) != len(self.levels):
            raise ValueError(f"expected {len(self.levels)} statuses, got {len(states)}")
        alpha = _alpha(dt, _STATUS_RC)
        targets = self._targets(*(bool(s) for s in states))
        self.levels = [
            (1 - alpha) * level + alpha * target
            for level, target in zip(self.levels, targets)
        ]


def format_displacement(displacement: float) -> str:
    """Engine displacement in cubic metres as shown on the info panel."""
    cubic_inches = displacement / _CUBIC_INCH
    if displacement < _LITRE:
        head = f"{displacement / _CUBIC_CENTIMETRE:.0f} cc -- "
    else:
        head = f"{displacement / _LITRE:.1f} L -- "
    return f"{head}{cubic_inches:.0f} CI"


def format_reading(
    value: float, precision: int, unit: str = "", space_before_unit: bool = True
) -> str:
    """Gauge value with fixed precision followed by its unit."""
    separator = " " if space_before_unit and unit else ""
    return f"{value:.{precision}f}{separator}{unit}"


def format_gear(gear: int) -> str:
    """Gear number shown to the driver; -1 is neutral."""
    return "N" if gear == -1 else str(gear + 1)