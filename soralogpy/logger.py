"""Named logger bound to a group, with an optionally overridden sink and level."""

from __future__ import annotations

from .event import Level


class Logger:
    """Sends messages of enough detail to its sink.

    Sink and level come from the logger's group unless they are overridden
    on the logger itself.
    """

    def __init__(self, system, name, group):
        if group is None:
            raise ValueError("logger needs a group")
        self._system = system
        self._name = name
        self._group = group
        self._sink = None
        self._level = Level.OFF
        self._is_sink_overridden = False
        self._is_level_overridden = False
        self.set_sink_from_group(group)
        self.set_level_from_group(group)

    @property
    def name(self) -> str:
        return self._name

    @property
    def system(self):
        return self._system

    @property
    def group(self):
        return self._group

    @property
    def sink(self):
        return self._sink

    @property
    def level(self) -> Level:
        return self._level

    @property
    def is_level_overridden(self) -> bool:
        return self._is_level_overridden

    @property
    def is_sink_overridden(self) -> bool:
        return self._is_sink_overridden

    def _lookup_group(self, group):
        if isinstance(group, str):
            return self._system.get_group(group)
        return group

    # Level

    def reset_level(self) -> None:
        """Take the level from the logger's own group again."""
        self.set_level_from_group(self._group)

    def set_level(self, level) -> None:
        """Override the level."""
        self._is_level_overridden = True
        self._level = Level(level)

    def set_level_from_group(self, group) -> None:
        """Take the level from ``group`` (a group or a group name).

        An unknown group name is ignored. The level counts as overridden
        unless ``group`` is the logger's own group.
        """
        group = self._lookup_group(group)
        if group is None:
            return
        self._is_level_overridden = group is not self._group
        self._level = group.level

    # Sink

    def reset_sink(self) -> None:
        """Take the sink from the logger's own group again."""
        self._sink = self._group.sink
        self._is_sink_overridden = False

    def set_sink(self, sink) -> None:
        """Override the sink with ``sink`` (a sink or a sink name).

        An unknown sink name is ignored.
        """
        if isinstance(sink, str):
            sink = self._system.get_sink(sink)
            if sink is None:
                return
        if sink is None:
            raise ValueError("sink must not be None")
        self._is_sink_overridden = True
        self._sink = sink

    def set_sink_from_group(self, group) -> None:
        """Take the sink from ``group`` (a group or a group name)."""
        group = self._lookup_group(group)
        if group is None:
            return
        sink = group.sink
        if sink is not None:
            self._is_sink_overridden = group is not self._group
            self._sink = sink

    # Group

    def set_group(self, group) -> None:
        """Move the logger to ``group``; non-overridden properties follow it."""
        group = self._lookup_group(group)
        if group is None:
            return
        self._group = group
        if not self._is_sink_overridden:
            self.set_sink_from_group(group)
        if not self._is_level_overridden:
            self.set_level_from_group(group)

    # Logging

    def log(self, level, fmt, *args) -> None:
        """Log a message if ``level`` is within the logger's level."""
        level = Level(level)
        if self._level >= level:
            self._sink.push(self._name, level, fmt, *args)

    def trace(self, fmt, *args) -> None:
        self.log(Level.TRACE, fmt, *args)

    def debug(self, fmt, *args) -> None:
        self.log(Level.DEBUG, fmt, *args)

    def verbose(self, fmt, *args) -> None:
        self.log(Level.VERBOSE, fmt, *args)

    def info(self, fmt, *args) -> None:
        self.log(Level.INFO, fmt, *args)

    def warn(self, fmt, *args) -> None:
        self.log(Level.WARN, fmt, *args)

    def error(self, fmt, *args) -> None:
        self.log(Level.ERROR, fmt, *args)

    def critical(self, fmt, *args) -> None:
        self.log(Level.CRITICAL, fmt, *args)

    def flush(self) -> None:
        """Write out everything queued in the logger's sink."""
        self._sink.flush()