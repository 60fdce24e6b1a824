"""Sink that appends formatted log records to a file."""

from __future__ import annotations

import os
import sys

from .event import ThreadInfoType
from .sink_to_console import _WorkerSink


class SinkToFile(_WorkerSink):
    """Appends events to the file at ``path``; ``rotate`` reopens it.

    Defaults: 2048 events, 1024-character messages, 4 MiB buffer, 1 s latency.
    If the file cannot be opened the problem is reported on stderr and events
    are discarded.
    """

    def __init__(self, name, path, thread_info_type=None, capacity=None,
                 max_message_length=None, buffer_size=None, latency=None):
        super().__init__(
            name,
            ThreadInfoType.NONE if thread_info_type is None else thread_info_type,
            1 << 11 if capacity is None else capacity,
            1 << 10 if max_message_length is None else max_message_length,
            1 << 22 if buffer_size is None else buffer_size,
            1000 if latency is None else latency,
        )
        self.path = os.fspath(path)
        self._need_to_rotate = False
        self._file = None
        try:
            self._file = self._open()
        except OSError as exc:
            print(f"Can't open log file '{self.path}': {exc.strerror}", file=sys.stderr)
        else:
            self._start_worker()

    def _open(self):
        return open(self.path, "a", encoding="utf-8")

    def _write(self, text: str) -> None:
        if self._file is not None:
            self._file.write(text)

    def _flush_destination(self) -> None:
        if self._file is not None:
            self._file.flush()

    def _after_flush(self) -> None:
        if not self._need_to_rotate:
            return
        self._need_to_rotate = False
        try:
            new_file = self._open()
        except OSError as exc:
            verb = "re-open" if self._file is not None else "open"
            print(f"Can't {verb} log file '{self.path}': {exc.strerror}", file=sys.stderr)
            return
        old_file, self._file = self._file, new_file
        if old_file is not None:
            old_file.close()

    def _release(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def flush(self) -> None:
        super().flush()

    def async_flush(self) -> None:
        super().async_flush()

    def rotate(self) -> None:
        """Reopen the log file at the next flush."""
        self._need_to_rotate = True
        self.async_flush()

    def close(self) -> None:
        super().close()