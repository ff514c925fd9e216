[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "promcommon"
version = "0.1.0"
description = "Label and metric data model, query values, alerts, logging, version info and WSGI routing helpers for monitoring components"
requires-python = ">=3.10"
keywords = [
    "monitoring",
    "metrics",
    "labels",
    "alerts",
    "silences",
    "fingerprint",
    "time series",
    "logfmt",
    "wsgi",
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
    "Topic :: System :: Monitoring",
    "Topic :: Internet :: WWW/HTTP :: WSGI",
    "Topic :: System :: Logging",
]
dependencies = [
    "werkzeug",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["promcommon"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
