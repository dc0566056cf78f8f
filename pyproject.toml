[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "statelogs"
version = "0.1.0"
description = "Turn cached Kubernetes object state into structured log entries, one per resource."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "monitoring", "logging", "state", "observability"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["statelogs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
