[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tablestream"
version = "0.1.0"
description = "Building blocks for partitioned stream processors: state signals, promises, backoff, statistics, partitioning helpers and fault injection."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "stream-processing",
    "partitioning",
    "state-machine",
    "promise",
    "backoff",
    "fault-injection",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tablestream"]

[tool.hatch.build.targets.sdist]
include = ["tablestream", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
