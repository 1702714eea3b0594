[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tallymetrics"
version = "0.1.0"
description = "Metric reporter fan-out, object pooling, UDP transports and M3 wire types for metrics emission"
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "m3", "thrift", "udp", "reporter", "monitoring"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tallymetrics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
