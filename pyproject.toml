[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "soralogpy"
version = "0.1.0"
description = "Hierarchical logging system with groups, sinks and buffered asynchronous output"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "logger", "sink", "syslog", "log groups"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["soralogpy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
