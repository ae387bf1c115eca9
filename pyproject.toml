[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nachosim"
version = "0.1.0"
description = "Simulated MIPS machine, MMU, disk, timer and interrupt hardware for teaching operating systems"
requires-python = ">=3.10"
dependencies = []
keywords = ["mips", "emulator", "operating-systems", "simulation", "education", "mmu", "tlb"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nachosim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
