[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nandsim"
version = "0.1.0"
description = "A file-backed NAND SSD simulator with a write-back command buffer"
requires-python = ">=3.10"
dependencies = []
keywords = ["ssd", "nand", "simulator", "emulator", "command-buffer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nandsim = "nandsim.command_checker:main"

[tool.hatch.build.targets.wheel]
packages = ["nandsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
