# enginesim

Building blocks for an internal-combustion engine simulator's audio path,
ignition timing and instrument panel. It is plain Python with no third-party
dependencies.

## Modules

- `enginesim.filters`
  - `Filter` passes samples through unchanged.
  - `LevelingFilter` is an automatic gain control. It follows a decaying signal
    peak and eases its attenuation towards `target / peak`, clamped to
    `[min_level, max_level]`.
  - `GaussianFilter(alpha, radius, cache_steps)` is a truncated Gaussian
    kernel. `calculate(s)` gives the exact value. `evaluate(s)` interpolates
    linearly from a lookup table. It raises `ValueError` unless `cache_steps`
    is greater than 32 and `radius` is positive.
- `enginesim.ignition`
  - `IgnitionModule` sets `ignition_event` on each enabled `SparkPlug` when the
    crankshaft sweeps past the plug's firing angle less the timing advance.
  - When `abs(v_theta)` exceeds `rev_limit`, the rev limiter holds off firing
    for `limiter_duration` seconds.
  - You supply the crankshaft and the timing curve. The crankshaft needs a
    `v_theta` attribute and a `cycle_angle()` method. The timing curve needs a
    `sample_triangle(x)` method.
- `enginesim.gauge`
  - `Gauge` is a dial whose needle follows `value` through a damped spring
    (`update(dt)`).
  - It computes `angle_at(value)`, `needle_angle()`, `ticks()` (a list of
    `Tick`) and `band_angles(band)` for a colour `Band`.
- `enginesim.oscilloscope`
  - `Oscilloscope(buffer_size)` keeps the most recent `DataPoint`s.
  - As points arrive it widens its y axis, and its x axis if
    `dynamically_resize_x` is set.
  - `normalize(point)` maps a point to fractions of the axis ranges.
- `enginesim.performance`
  - `PerformanceStats` keeps exponentially smoothed time per timestep, audio
    latency, input buffer usage and simulation frequency.
  - `leveler_percentage(gain, min_gain, max_gain)` turns a leveler gain into a
    0–100 reading.
- `enginesim.dyno`
  - `PowerTracker` low-pass filters torque (lb-ft) and horsepower. It records
    their peaks and the rpm each peak occurred at, and `summary()` reports
    them.
  - `StatusLights` fades four indicator levels (ignition, starter, dyno, hold)
    towards their state.
  - Text helpers: `format_displacement`, `format_reading` and `format_gear`.
- `enginesim.geometry`
  - `GeometryGenerator(vertex_buffer_size, index_buffer_size)` writes `Vertex`
    objects and triangle indices into bounded buffers.
  - 2D shapes: lines, frames, grids, rings, circles, cams, rhombuses,
    trapezoids, isosceles triangles and polylines (`start_path` /
    `generate_path_segment`).
  - Shapes are bracketed by `start_shape()` and `end_shape()`, which returns
    `GeometryIndices`.
  - A shape that does not fit raises `GeometryCapacityError`. Frames and grids
    are rolled back whole when that happens.
- `enginesim.geometry3d`
  - Shapes placed on an arbitrary plane in 3D, written through a
    `GeometryGenerator`.
  - Functions: `generate_filled_circle`, `generate_filled_fan_polygon`,
    `generate_line_ring`, `generate_line_ring_balanced` and `generate_line`.
  - `find_orthogonal(v)` gives a unit vector perpendicular to `v`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from enginesim.filters import LevelingFilter
from enginesim.dyno import PowerTracker, format_gear
from enginesim.geometry import GeometryGenerator

leveler = LevelingFilter()
out = [leveler.f(s) for s in (1000.0, -20000.0, 35000.0)]

tracker = PowerTracker()
tracker.update(0.016, torque=300.0, rpm=4500.0)
print(tracker.summary())
print(format_gear(-1))  # "N"

gen = GeometryGenerator(64, 96)
gen.start_shape()
gen.generate_line2d(0.0, 0.0, 1.0, 0.0, 0.1)
print(gen.end_shape().face_count)  # 2
```

## What it does not do

This is a library of parts, not a running simulator.

- It has no command-line program, window or renderer. Meshes are produced as
  lists of vertices and indices for you to draw.
- It has no crankshaft, gas-flow or combustion model.
- It has no audio synthesizer or audio output.
- The ignition module and cam geometry work with crankshaft, timing-curve and
  lift objects that you provide.