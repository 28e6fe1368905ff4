"""Smoothed performance statistics and mixer readouts for the instrument panel."""

from __future__ import annotations

from dataclasses import dataclass

_SAMPLE_RETENTION = 0.95
_FREQUENCY_RETENTION = 0.9


def _smooth(previous: float, sample: float, retention: float) -> float:
    return retention * previous + (1 - retention) * sample


@dataclass
class PerformanceStats:
    """Exponentially smoothed timing figures of the running simulation."""

    time_per_timestep: float = 0.0
    filtered_simulation_frequency: float = 0.0
    input_buffer_usage: float = 0.0
    audio_latency: float = 0.0

    def add_time_per_timestep_sample(self, sample: float) -> None:
        self.time_per_timestep = _smooth(
            self.time_per_timestep, sample, _SAMPLE_RETENTION
        )

    def add_audio_latency_sample(self, sample: float) -> None:
        self.audio_latency = _smooth(self.audio_latency, sample, _SAMPLE_RETENTION)

    def add_input_buffer_usage_sample(self, sample: float) -> None:
        self.input_buffer_usage = _smooth(
            self.input_buffer_usage, sample, _SAMPLE_RETENTION
        )

    def update_simulation_frequency(self, frequency: float, speed: float) -> None:
        """Fold in the current simulation frequency scaled by the simulation speed."""
        self.filtered_simulation_frequency = _smooth(
            self.filtered_simulation_frequency, frequency * speed, _FREQUENCY_RETENTION
        )

    def time_per_timestep_percentage(self) -> float:
        """Real time spent per timestep as a percentage of the ideal time per timestep."""
        # The ideal time is 1 / frequency; a zero frequency makes it infinite.
        return self.time_per_timestep * self.filtered_simulation_frequency * 100.0


def leveler_percentage(gain: float, min_gain: float, max_gain: float) -> float:
    """Leveler gain shown on a 0-100 scale relative to its configured limits."""
    if max_gain == 0:
        raise ValueError("max_gain must be non-zero")
    return 100.0 * (gain - min_gain) / max_gain