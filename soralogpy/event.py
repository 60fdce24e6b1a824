"""Log levels, thread-info kinds and the logging event record."""

from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass
from enum import Enum, IntEnum

MAX_NAME_LENGTH = 32
MAX_THREAD_NAME_LENGTH = 15


class Level(IntEnum):
    """Detail level of a message; a higher value means more detail."""

    OFF = 0
    CRITICAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    VERBOSE = 5
    DEBUG = 6
    TRACE = 7


class ThreadInfoType(Enum):
    """Which information about the emitting thread is recorded."""

    NONE = "none"
    NAME = "name"
    ID = "id"


_LEVEL_NAMES = {
    Level.OFF: "Off",
    Level.CRITICAL: "Critical",
    Level.ERROR: "Error",
    Level.WARN: "Warning",
    Level.INFO: "Info",
    Level.VERBOSE: "Verbose",
    Level.DEBUG: "Debug",
    Level.TRACE: "Trace",
}


def level_to_str(level: Level) -> str:
    """Return the human-readable name of a level."""
    return _LEVEL_NAMES[Level(level)]


def level_to_char(level: Level) -> str:
    """Return the one-letter abbreviation of a level."""
    return level_to_str(level)[0]


_thread_local = threading.local()
_thread_counter = itertools.count(1)
_thread_counter_lock = threading.Lock()


def _thread_number() -> int:
    """Small sequential number of the calling thread, stable for its lifetime."""
    number = getattr(_thread_local, "number", None)
    if number is None:
        with _thread_counter_lock:
            number = next(_thread_counter)
        _thread_local.number = number
    return number


@dataclass(frozen=True)
class Event:
    """A single logging event."""

    timestamp: int
    level: Level
    name: str
    message: str
    thread_number: int = 0
    thread_name: str = ""

    @classmethod
    def make(cls, name, thread_info_type, level, fmt, max_message_length, *args):
        """Create an event now, formatting ``fmt`` with ``args``.

        A formatting failure yields an error event from logger ``Soralog``
        describing the problem instead of raising.
        """
        timestamp = time.time_ns()
        thread_number = 0
        thread_name = ""
        if thread_info_type is ThreadInfoType.NAME:
            thread_name = threading.current_thread().name[:MAX_THREAD_NAME_LENGTH]
            thread_number = _thread_number()
        elif thread_info_type is ThreadInfoType.ID:
            thread_number = _thread_number()

        level = Level(level)
        try:
            message = str(fmt).format(*args)
        except Exception as exc:  # noqa: BLE001 - any formatting failure is reported
            message = f"Format error: {exc}; Format: {fmt}"
            name = "Soralog"
            level = Level.ERROR

        return cls(
            timestamp=timestamp,
            level=level,
            name=str(name)[:MAX_NAME_LENGTH],
            message=message[: max(0, max_message_length)],
            thread_number=thread_number,
            thread_name=thread_name,
        )