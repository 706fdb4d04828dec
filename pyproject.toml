[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lynxcore"
version = "0.1.0"
description = "Building blocks of an Atari Lynx emulator: memory map, in-memory ROM file, Mikey timers, audio, display DMA and ComLynx serial"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "atari", "lynx", "mikey", "timers", "comlynx"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lynxcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
