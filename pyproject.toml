[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tankpid"
version = "0.1.0"
description = "PID water-level control for an ultrasonic tank sensor, with a serial receive buffer and report formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["pid", "control", "water level", "ultrasonic", "serial"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tankpid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
