"""Sample filters used by the audio path: pass-through, leveling and Gaussian."""

from __future__ import annotations

import math


class Filter:
    """Base sample filter; passes every sample through unchanged."""

    def f(self, sample: float) -> float:
        return sample


class LevelingFilter(Filter):
    """Automatic gain control that tracks a decaying peak and eases towards a target level."""

    def __init__(self) -> None:
        self.peak = 30000.0
        self.attenuation = 1.0
        self.target = 30000.0
        self.min_level = 0.0
        self.max_level = 1.0

    def f(self, sample: float) -> float:
        self.peak *= 0.999
        if abs(sample) > self.peak:
            self.peak = abs(sample)

        attenuation = self.target / self.peak
        attenuation = min(max(attenuation, self.min_level), self.max_level)

        self.attenuation = 0.9 * self.attenuation + 0.1 * attenuation
        return sample * self.attenuation


class GaussianFilter:
    """Truncated Gaussian kernel with a precomputed, linearly interpolated lookup table."""

    _PADDING = 32

    def __init__(self, alpha: float, radius: float, cache_steps: int) -> None:
        if cache_steps <= self._PADDING:
            raise ValueError(f"cache_steps must exceed {self._PADDING}")
        if radius <= 0:
            raise ValueError("radius must be positive")

        self.alpha = alpha
        self.radius = radius
        self.cache_steps = cache_steps
        self._exp_s = math.exp(-alpha * radius * radius)
        self._inv_r = 1.0 / radius
        self._cache = self._generate_cache()

    @property
    def _actual_steps(self) -> int:
        return self.cache_steps - self._PADDING

    def _generate_cache(self) -> list[float]:
        actual = self._actual_steps
        step = 1.0 / actual
        cache = [self.calculate(i * step * self.radius) for i in range(actual + 1)]
        cache.extend([0.0] * (self.cache_steps - len(cache)))
        return cache

    def calculate(self, s: float) -> float:
        """Exact kernel value at distance ``s``, clipped to zero outside the radius."""
        return max(0.0, math.exp(-self.alpha * s * s) - self._exp_s)

    def evaluate(self, s: float) -> float:
        """Kernel value at distance ``s`` interpolated from the lookup table."""
        s_sample = self._actual_steps * abs(s) * self._inv_r
        s0 = math.floor(s_sample)
        s1 = math.ceil(s_sample)
        if s1 >= len(self._cache):
            return 0.0
        d = s_sample - s0
        return (1 - d) * self._cache[s0] + d * self._cache[s1]