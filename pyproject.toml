[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "enginesim"
version = "0.1.0"
description = "Engine simulator building blocks: audio filters, ignition timing, gauge and oscilloscope models, dyno statistics and triangle-mesh generation"
requires-python = ">=3.10"
dependencies = []
keywords = ["engine", "simulation", "ignition", "gauge", "oscilloscope", "dyno", "geometry", "audio filter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["enginesim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
