[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "p2pstream"
version = "1.0.0"
description = "Time-stepped simulator of peer-to-peer live video streaming with an interactive Tk viewer"
requires-python = ">=3.10"
keywords = ["p2p", "peer-to-peer", "streaming", "simulation", "overlay network"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
p2pstream = "p2pstream.app:main"

[tool.hatch.build.targets.wheel]
packages = ["p2pstream"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
