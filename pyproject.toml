[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbfupload"
version = "0.1.0"
description = "Upload archived SMA inverter readings from a local database to PVOutput in batches"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = [
    "pvoutput",
    "solar",
    "inverter",
    "sma",
    "photovoltaic",
    "upload",
    "daemon",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["sbfupload"]

[tool.pytest.ini_options]
addopts = "-ra"
