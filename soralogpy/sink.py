"""Base sink with an event queue, plus the sink to nowhere and the multisink."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Iterator

from .event import Event, Level, ThreadInfoType


def format_timestamp(timestamp: int) -> str:
    """Render a nanosecond epoch timestamp as ``YY.MM.DD HH:MM:SS.uuuuuu`` local time."""
    seconds, nanos = divmod(timestamp, 1_000_000_000)
    tm = time.localtime(seconds)
    return (
        f"{tm.tm_year % 100:02}.{tm.tm_mon:02}.{tm.tm_mday:02} "
        f"{tm.tm_hour:02}:{tm.tm_min:02}:{tm.tm_sec:02}.{nanos // 1000:06}"
    )


class Sink(ABC):
    """Accumulates events in a bounded queue and writes them out on demand.

    ``latency`` is in milliseconds; zero means every event is written at once.
    """

    def __init__(self, name, thread_info_type, max_events, max_message_length,
                 max_buffer_size, latency):
        self._name = name
        self.thread_info_type = ThreadInfoType(thread_info_type)
        self.max_events = max_events
        self.max_message_length = max_message_length
        # The buffer must hold at least two messages of maximal length.
        self.max_buffer_size = max(max_buffer_size, max_message_length * 2)
        self.latency = latency
        self._events: deque[Event] = deque()
        self._events_lock = threading.Lock()
        self._size = 0
        self._underlying: tuple[Sink, ...] | None = None

    @property
    def name(self) -> str:
        return self._name

    def push(self, name, level, fmt, *args) -> None:
        """Queue a new event, flushing as the queue and latency require."""
        if self._underlying is not None:
            for sink in self._underlying:
                sink.push(name, level, fmt, *args)
            return

        if self.max_events < 1:
            raise ValueError(f"sink '{self._name}' has no room for events")

        event = Event.make(name, self.thread_info_type, Level(level), fmt,
                           self.max_message_length, *args)
        while not self._put(event):
            # Queue is full: write out immediately and try again.
            self.flush()

        if self.latency == 0:
            self.flush()
        elif self._size >= self.max_buffer_size * 4 // 5:
            self.async_flush()

    def _put(self, event: Event) -> bool:
        with self._events_lock:
            if len(self._events) >= self.max_events:
                return False
            self._events.append(event)
            self._size += len(event.message)
            return True

    def _pop_event(self) -> Event | None:
        with self._events_lock:
            if not self._events:
                return None
            event = self._events.popleft()
            self._size -= len(event.message)
            return event

    def _drain(self) -> Iterator[Event]:
        while (event := self._pop_event()) is not None:
            yield event

    def _queued(self) -> int:
        with self._events_lock:
            return len(self._events)

    @abstractmethod
    def flush(self) -> None:
        """Write all queued events to the destination now."""

    @abstractmethod
    def async_flush(self) -> None:
        """Request that queued events be written soon."""

    @abstractmethod
    def rotate(self) -> None:
        """Do whatever rotating the destination means (e.g. reopen a file)."""

    def close(self) -> None:
        """Write out what is left."""
        self.flush()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SinkToNowhere(Sink):
    """Sink that discards every event."""

    def __init__(self, name):
        super().__init__(name, ThreadInfoType.NONE, 1024, 0, 0, 1000)

    def flush(self) -> None:
        for _ in self._drain():
            pass

    def async_flush(self) -> None:
        self.flush()

    def rotate(self) -> None:
        self.flush()


class Multisink(Sink):
    """Sink that forwards every event to several underlying sinks."""

    def __init__(self, name, sinks: Iterable[Sink]):
        super().__init__(name, ThreadInfoType.NONE, 0, 0, 0, 0)
        self._underlying = tuple(sinks)

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return self._underlying

    def flush(self) -> None:
        for sink in self._underlying:
            sink.flush()

    def async_flush(self) -> None:
        pass

    def rotate(self) -> None:
        for sink in self._underlying:
            sink.rotate()