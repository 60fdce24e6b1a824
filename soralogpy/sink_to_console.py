"""Sink that writes formatted log records to standard output or error."""

from __future__ import annotations

import sys
import threading
import time
from enum import Enum

from .event import Event, Level, ThreadInfoType, level_to_str
from .sink import Sink, format_timestamp

SEPARATOR = "  "
RESET_COLOR = "\x1b[0m"
_BOLD = "\x1b[1m"
_ITALIC = "\x1b[3m"


def _fg(rgb: int) -> str:
    return f"\x1b[38;2;{(rgb >> 16) & 0xFF};{(rgb >> 8) & 0xFF};{rgb & 0xFF}m"


_GRAY = _fg(0x808080)

_LEVEL_COLORS = {
    Level.OFF: _fg(0xA52A2A),       # brown
    Level.CRITICAL: _fg(0xFF0000),  # red
    Level.ERROR: _fg(0xFF4500),     # orange red
    Level.WARN: _fg(0xFFA500),      # orange
    Level.INFO: _fg(0x228B22),      # forest green
    Level.VERBOSE: _fg(0x006400),   # dark green
    Level.DEBUG: _fg(0x0000CD),     # medium blue
    Level.TRACE: _fg(0x808080),     # gray
}

_THREAD_NAME_WIDTH = 15
_LEVEL_WIDTH = 8
_RECORD_OVERHEAD = 256


def _thread_part(event: Event, thread_info_type: ThreadInfoType) -> str:
    if thread_info_type is ThreadInfoType.NAME:
        return event.thread_name[:_THREAD_NAME_WIDTH].ljust(_THREAD_NAME_WIDTH) + SEPARATOR
    if thread_info_type is ThreadInfoType.ID:
        return f"T:{event.thread_number:<6}" + SEPARATOR
    return ""


def _plain_record(event: Event, thread_info_type: ThreadInfoType) -> str:
    """Render an event as one uncoloured line, newline included."""
    return (
        format_timestamp(event.timestamp)
        + SEPARATOR
        + _thread_part(event, thread_info_type)
        + level_to_str(event.level).ljust(_LEVEL_WIDTH)
        + SEPARATOR
        + event.name
        + SEPARATOR
        + event.message
        + "\n"
    )


def _colored_record(event: Event, thread_info_type: ThreadInfoType) -> str:
    """Render an event as one line with ANSI colours and emphasis."""
    stamp = format_timestamp(event.timestamp)
    date_part, _, micros = stamp.rpartition(".")
    level = event.level
    if level <= Level.ERROR:
        text_style = _BOLD
    elif level >= Level.DEBUG:
        text_style = _ITALIC
    else:
        text_style = ""
    return (
        date_part
        + _GRAY + "." + micros + RESET_COLOR
        + SEPARATOR
        + _thread_part(event, thread_info_type)
        + _LEVEL_COLORS[level] + _BOLD
        + level_to_str(level).ljust(_LEVEL_WIDTH) + RESET_COLOR
        + SEPARATOR
        + _BOLD + event.name + RESET_COLOR
        + SEPARATOR
        + text_style + event.message + RESET_COLOR
        + "\n"
    )


class _WorkerSink(Sink):
    """Sink whose queue is written out by a background worker every ``latency`` ms."""

    def __init__(self, name, thread_info_type, max_events, max_message_length,
                 max_buffer_size, latency):
        super().__init__(name, thread_info_type, max_events, max_message_length,
                         max_buffer_size, latency)
        self._cond = threading.Condition()
        self._flush_lock = threading.Lock()
        self._need_to_flush = False
        self._need_to_finalize = False
        self._next_flush = 0.0
        self._worker: threading.Thread | None = None
        self._closed = False
        self._write_limit = max(1, self.max_buffer_size - self.max_message_length
                                - _RECORD_OVERHEAD)

    def _start_worker(self) -> None:
        if self.latency != 0:
            self._worker = threading.Thread(
                target=self._run, name=f"log:{self.name}", daemon=True)
            self._worker.start()

    def _format(self, event: Event) -> str:
        return _plain_record(event, self.thread_info_type)

    def _write(self, text: str) -> None:
        raise NotImplementedError

    def _flush_destination(self) -> None:
        raise NotImplementedError

    def _after_flush(self) -> None:
        """Hook run at the end of every flush."""

    def _release(self) -> None:
        """Hook run once the sink is closed."""

    def flush(self) -> None:
        if not self._flush_lock.acquire(blocking=False):
            return
        try:
            parts: list[str] = []
            buffered = 0
            while True:
                event = self._pop_event()
                if event is not None:
                    record = self._format(event)
                    parts.append(record)
                    buffered += len(record)
                if (event is None or buffered >= self._write_limit
                        or time.monotonic() >= self._next_flush):
                    self._next_flush = time.monotonic() + self.latency / 1000
                    if parts:
                        self._write("".join(parts))
                        parts.clear()
                        buffered = 0
                if event is None:
                    self._need_to_flush = False
                    self._flush_destination()
                    break
            self._after_flush()
        finally:
            self._flush_lock.release()

    def async_flush(self) -> None:
        if self.latency != 0:
            with self._cond:
                self._need_to_flush = True
                self._cond.notify()
        else:
            self.flush()

    def _run(self) -> None:
        self._next_flush = time.monotonic()
        while True:
            with self._cond:
                if not (self._need_to_flush or self._need_to_finalize):
                    timeout = max(0.0, self._next_flush - time.monotonic())
                    notified = self._cond.wait(timeout)
                    if notified and not (self._need_to_flush or self._need_to_finalize):
                        continue
            self.flush()
            if self._need_to_finalize and self._queued() == 0:
                return

    def close(self) -> None:
        """Write out everything queued, stop the worker and release the destination."""
        if self._closed:
            return
        self._closed = True
        if self._worker is not None:
            with self._cond:
                self._need_to_finalize = True
                self._need_to_flush = True
                self._cond.notify()
            self._worker.join()
            self._worker = None
        else:
            self.flush()
        self._release()


class Stream(Enum):
    """Console stream a sink writes to."""

    STDOUT = 1
    STDERR = 2


class SinkToConsole(_WorkerSink):
    """Writes events to stdout or stderr, optionally with colours.

    Defaults: 64 events, 1024-character messages, 128 KiB buffer, 200 ms latency.
    """

    def __init__(self, name, stream_type, with_color, thread_info_type=None,
                 capacity=None, max_message_length=None, buffer_size=None,
                 latency=None):
        super().__init__(
            name,
            ThreadInfoType.NONE if thread_info_type is None else thread_info_type,
            1 << 6 if capacity is None else capacity,
            1 << 10 if max_message_length is None else max_message_length,
            1 << 17 if buffer_size is None else buffer_size,
            200 if latency is None else latency,
        )
        self.stream_type = Stream(stream_type)
        self._stream = sys.stderr if self.stream_type is Stream.STDERR else sys.stdout
        self.with_color = bool(with_color)
        self._start_worker()

    def _format(self, event: Event) -> str:
        if self.with_color:
            return _colored_record(event, self.thread_info_type)
        return _plain_record(event, self.thread_info_type)

    def _write(self, text: str) -> None:
        self._stream.write(text)

    def _flush_destination(self) -> None:
        self._stream.flush()

    def flush(self) -> None:
        super().flush()

    def async_flush(self) -> None:
        super().async_flush()

    def rotate(self) -> None:
        """Console output has nothing to rotate."""

    def close(self) -> None:
        super().close()