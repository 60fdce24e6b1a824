"""Sink that sends log records to the system log."""

from __future__ import annotations

import syslog
import threading

from .event import Event, Level, ThreadInfoType, level_to_str
from .sink import format_timestamp
from .sink_to_console import SEPARATOR, _WorkerSink

# Trace and "off" messages are never sent to syslog.
_PRIORITIES = {
    Level.CRITICAL: syslog.LOG_EMERG,
    Level.ERROR: syslog.LOG_ALERT,
    Level.WARN: syslog.LOG_WARNING,
    Level.INFO: syslog.LOG_NOTICE,
    Level.VERBOSE: syslog.LOG_INFO,
    Level.DEBUG: syslog.LOG_DEBUG,
}


def _record(event: Event, thread_info_type: ThreadInfoType) -> str:
    if thread_info_type is ThreadInfoType.NAME:
        thread_part = event.thread_name + SEPARATOR
    elif thread_info_type is ThreadInfoType.ID:
        thread_part = f"T:{event.thread_number}" + SEPARATOR
    else:
        thread_part = ""
    return (
        format_timestamp(event.timestamp)
        + SEPARATOR
        + thread_part
        + level_to_str(event.level)
        + SEPARATOR
        + event.name
        + SEPARATOR
        + event.message
    )


class SinkToSyslog(_WorkerSink):
    """Sends events to syslog under ``ident``; only one may be open at a time.

    Defaults: 2048 events, 1024-character messages, 4 MiB buffer, 1 s latency.
    """

    _opened = False
    _opened_lock = threading.Lock()

    def __init__(self, name, ident, thread_info_type=None, capacity=None,
                 max_message_length=None, buffer_size=None, latency=None):
        super().__init__(
            name,
            ThreadInfoType.NONE if thread_info_type is None else thread_info_type,
            1 << 11 if capacity is None else capacity,
            1 << 10 if max_message_length is None else max_message_length,
            1 << 22 if buffer_size is None else buffer_size,
            1000 if latency is None else latency,
        )
        self.ident = ident
        self._owns_syslog = False
        with SinkToSyslog._opened_lock:
            if SinkToSyslog._opened:
                raise RuntimeError(
                    "SinkToSyslog has not created: Syslog already opened")
            SinkToSyslog._opened = True
        self._owns_syslog = True
        syslog.openlog(ident, syslog.LOG_PID | syslog.LOG_NDELAY, syslog.LOG_USER)
        self._start_worker()

    def flush(self) -> None:
        if not self._flush_lock.acquire(blocking=False):
            return
        try:
            for event in self._drain():
                priority = _PRIORITIES.get(event.level)
                if priority is not None:
                    syslog.syslog(priority, _record(event, self.thread_info_type))
            self._need_to_flush = False
        finally:
            self._flush_lock.release()

    def async_flush(self) -> None:
        super().async_flush()

    def rotate(self) -> None:
        """Syslog has nothing to rotate."""

    def _release(self) -> None:
        if not self._owns_syslog:
            return
        self._owns_syslog = False
        syslog.closelog()
        with SinkToSyslog._opened_lock:
            SinkToSyslog._opened = False

    def close(self) -> None:
        super().close()