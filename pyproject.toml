[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nwdamage"
version = "0.1.0"
description = "Analysis of primary knock-on atom records from neutron irradiation transport simulations"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "neutron",
    "irradiation",
    "radiation damage",
    "primary knock-on atom",
    "linked cell",
    "monte carlo",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nwdamage"]

[tool.pytest.ini_options]
addopts = "-ra"
