"""Engine simulator building blocks: audio filters, ignition timing, gauge and oscilloscope models, dyno statistics and mesh generation."""

__version__ = "0.1.0"