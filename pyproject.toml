[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "telguard"
version = "0.1.0"
description = "Telemetry helpers: OTLP attribute transforms, log-to-attribute encoding, samplers and cardinality guards for tracers and meters"
requires-python = ">=3.10"
dependencies = []
keywords = ["telemetry", "tracing", "metrics", "cardinality", "otlp", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Logging",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["telguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
