"""Hierarchical logging with groups, loggers and buffered sinks."""

__version__ = "0.1.0"

__all__ = [
    "configurator",
    "event",
    "logger",
    "logging_system",
    "sink",
    "sink_to_console",
    "sink_to_file",
    "sink_to_syslog",
]