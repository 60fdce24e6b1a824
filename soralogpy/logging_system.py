"""Groups of loggers and the logging system that owns sinks, groups and loggers."""

from __future__ import annotations

import threading
import weakref

from .configurator import ConfigResult
from .event import Level
from .logger import Logger
from .sink import SinkToNowhere

_FALLBACK = "*"


class Group:
    """Named set of defaults (sink and level) that loggers and child groups inherit."""

    def __init__(self, system, name, parent=None, sink=None, level=None):
        self._system = system
        self._name = name
        self._parent = None
        self._sink = None
        self._level = Level.OFF
        self._is_sink_overridden = False
        self._is_level_overridden = False

        if parent is not None:
            parent_group = parent if isinstance(parent, Group) else system.get_group(parent)
            if parent_group is None:
                raise ValueError(f"Parent group '{parent}' does not exist")
            self._parent = parent_group
            self._sink = parent_group.sink
            self._level = parent_group.level
        else:
            if level is None:
                raise ValueError(f"Group '{name}' without parent needs a level")
            self._is_sink_overridden = True
            self._is_level_overridden = True
            self._sink = system.get_sink(_FALLBACK)

        if level is not None:
            self.set_level(level)
        if sink is not None:
            found = system.get_sink(sink)
            self.set_sink(found if found is not None else system.get_sink(_FALLBACK))

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self):
        return self._parent

    @property
    def sink(self):
        return self._sink

    @property
    def level(self) -> Level:
        return self._level

    @property
    def is_sink_overridden(self) -> bool:
        return self._is_sink_overridden

    @property
    def is_level_overridden(self) -> bool:
        return self._is_level_overridden

    def set_parent_group(self, parent) -> None:
        """Attach to ``parent``; non-overridden properties follow it."""
        if parent is self:
            raise ValueError(f"Group '{self._name}' can't be its own parent")
        self._parent = parent
        if parent is not None:
            if not self._is_sink_overridden:
                self.set_sink_from_group(parent)
            if not self._is_level_overridden:
                self.set_level_from_group(parent)
        else:
            self._is_sink_overridden = True
            self._is_level_overridden = True

    def unset_parent_group(self) -> None:
        """Detach from the parent; own properties become overridden."""
        self._parent = None
        self._is_sink_overridden = True
        self._is_level_overridden = True

    def set_sink(self, sink) -> None:
        self._sink = sink
        self._is_sink_overridden = True

    def reset_sink(self) -> None:
        """Take the sink from the parent again, if there is one."""
        if self._parent is not None:
            self._sink = self._parent.sink
            self._is_sink_overridden = False

    def set_sink_from_group(self, group) -> None:
        if group is not None:
            self._sink = group.sink
            self._is_sink_overridden = group is not self._parent

    def set_level(self, level) -> None:
        self._level = Level(level)
        self._is_level_overridden = True

    def reset_level(self) -> None:
        """Take the level from the parent again, if there is one."""
        if self._parent is not None:
            self._level = self._parent.level
            self._is_level_overridden = False

    def set_level_from_group(self, group) -> None:
        if group is not None:
            self._level = group.level
            self._is_level_overridden = group is not self._parent


class LoggingSystem:
    """Owns sinks, groups and loggers and propagates changes between them."""

    def __init__(self, configurator):
        self._configurator = configurator
        self._lock = threading.RLock()
        self._sinks = {}
        self._groups = {}
        self._loggers = weakref.WeakValueDictionary()
        self._is_configured = False
        self.make_sink(SinkToNowhere, _FALLBACK)

    def make_sink(self, factory, name, *args, **kwargs):
        """Create a sink with ``factory(name, *args, **kwargs)`` and register it."""
        sink = factory(name, *args, **kwargs)
        with self._lock:
            self._sinks[name] = sink
        return sink

    def make_group(self, name, parent=None, sink=None, level=None):
        """Create and register a group; the first one becomes the fallback group."""
        group = Group(self, name, parent, sink, level)
        with self._lock:
            self._groups.setdefault(_FALLBACK, group)
            self._groups[group.name] = group
        return group

    def set_fallback_group(self, group_name) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            if group is None:
                return False
            self._groups[_FALLBACK] = group
            return True

    def get_fallback_group(self):
        with self._lock:
            return self._groups.get(_FALLBACK)

    def configure(self) -> ConfigResult:
        """Apply the configurator once and check the outcome."""
        with self._lock:
            if self._is_configured:
                raise RuntimeError("LoggerSystem is already configured")
            self._is_configured = True
            result = self._configurator.apply_on(self)

            if not self._groups:
                result.message += ("E: No one group is defined; "
                                   "Logging system is unworkable\n")
                result.has_error = True
                return result

            for name in sorted(self._groups):
                if name == _FALLBACK:
                    continue
                if self._groups[name].sink.name == _FALLBACK:
                    result.message += (f"W: Group '{name}' has undefined sink; "
                                       "Sink to nowhere will be used\n")
                    result.has_warning = True
            return result

    def get_logger(self, logger_name, group_name, sink_name=None, level=None):
        """Return the logger named ``logger_name``, creating it if needed."""
        with self._lock:
            if not self._is_configured:
                raise RuntimeError("LoggerSystem is not yet configured")

            existing = self._loggers.get(logger_name)
            if existing is not None:
                return existing

            if group_name == _FALLBACK:
                warn_msg = ("Default group (calling with name '*') is deprecated and "
                            "should not used anymore; Define existing group explicitly")
                if __debug__:
                    raise ValueError(warn_msg)
                Logger(self, "Soralog", self.get_fallback_group()).warn(warn_msg)

            group = self.get_group(group_name)
            if group is None:
                group = self.get_fallback_group()
                if group is None:
                    raise LookupError("No group is defined, not even a fallback one")
                Logger(self, "Soralog", group).warn(
                    "Group '{}' for logger '{}' is not found. "
                    "Fallback group will be used (it is group '{}' right now).",
                    group_name, logger_name, group.name)

            logger = Logger(self, logger_name, group)
            if sink_name is not None:
                logger.set_sink(sink_name)
            if level is not None:
                logger.set_level(level)

            self._loggers[logger.name] = logger
            return logger

    def get_sink(self, sink_name):
        with self._lock:
            return self._sinks.get(sink_name)

    def get_group(self, group_name):
        with self._lock:
            return self._groups.get(group_name)

    # Propagation

    def _affected(self, group, stops):
        """Depth of every group below ``group`` (-1 if not affected) and the
        affected groups by stage, nearest first."""
        passed = {}
        stages = []

        def depth(current):
            if current in passed:
                return passed[current]
            if current is group:
                return 0
            if stops(current) or current.parent is None:
                return -1
            n = depth(current.parent)
            if n == -1:
                return -1
            while len(stages) <= n:
                stages.append(set())
            stages[n].add(current)
            return n + 1

        for each in list(self._groups.values()):
            passed[each] = depth(each)
        return passed, stages

    def _touched(self, passed, group) -> bool:
        return passed.get(group, -1) != -1

    def _set_parent_of_group(self, group, parent) -> None:
        if parent is not None and parent.parent is group:
            parent.unset_parent_group()
        group.set_parent_group(parent)

        with self._lock:
            passed, stages = self._affected(
                group, lambda g: g.is_level_overridden and g.is_sink_overridden)
            for stage in stages:
                for changing in stage:
                    changing.set_parent_group(changing.parent)
            for logger in list(self._loggers.values()):
                if self._touched(passed, logger.group):
                    logger.set_group(logger.group)

    def _set_sink_of_group(self, group, sink) -> None:
        if sink is not None:
            group.set_sink(sink)
        else:
            group.reset_sink()

        with self._lock:
            passed, stages = self._affected(group, lambda g: g.is_sink_overridden)
            for stage in stages:
                for changing in stage:
                    changing.set_sink_from_group(changing.parent)
            for logger in list(self._loggers.values()):
                if not logger.is_sink_overridden and self._touched(passed, logger.group):
                    logger.set_sink_from_group(logger.group)

    def _set_level_of_group(self, group, level) -> None:
        if level is not None:
            group.set_level(level)
        else:
            group.reset_level()

        with self._lock:
            passed, stages = self._affected(group, lambda g: g.is_level_overridden)
            for stage in stages:
                for changing in stage:
                    changing.set_level_from_group(changing.parent)
            for logger in list(self._loggers.values()):
                if not logger.is_level_overridden and self._touched(passed, logger.group):
                    logger.set_level_from_group(logger.group)

    # Changes by name

    def set_parent_of_group(self, group_name, parent_name) -> bool:
        """Make ``parent_name`` the parent of ``group_name``; refuse cycles."""
        with self._lock:
            group = self._groups.get(group_name)
            parent = self._groups.get(parent_name)
            if group is None or parent is None or group is parent:
                return False
            if parent.parent is not group:
                current = parent.parent
                while current is not None:
                    if current is group:
                        return False
                    current = current.parent
            self._set_parent_of_group(group, parent)
            return True

    def unset_parent_of_group(self, group_name) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            if group is None:
                return False
            self._set_parent_of_group(group, None)
            return True

    def set_sink_of_group(self, group_name, sink_name) -> bool:
        with self._lock:
            sink = self._sinks.get(sink_name)
            group = self._groups.get(group_name)
            if sink is None or group is None:
                return False
            self._set_sink_of_group(group, sink)
            return True

    def reset_sink_of_group(self, group_name) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            if group is None:
                return False
            self._set_sink_of_group(group, None)
            return True

    def set_level_of_group(self, group_name, level) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            if group is None:
                return False
            self._set_level_of_group(group, Level(level))
            return True

    def reset_level_of_group(self, group_name) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            if group is None:
                return False
            self._set_level_of_group(group, None)
            return True

    def set_group_of_logger(self, logger_name, group_name) -> bool:
        with self._lock:
            group = self._groups.get(group_name)
            logger = self._loggers.get(logger_name)
            if group is None or logger is None:
                return False
            logger.set_group(group)
            return True

    def set_sink_of_logger(self, logger_name, sink_name) -> bool:
        with self._lock:
            sink = self._sinks.get(sink_name)
            logger = self._loggers.get(logger_name)
            if sink is None or logger is None:
                return False
            logger.set_sink(sink)
            return True

    def reset_sink_of_logger(self, logger_name) -> bool:
        with self._lock:
            logger = self._loggers.get(logger_name)
            if logger is None:
                return False
            logger.set_sink_from_group(logger.group)
            return True

    def set_level_of_logger(self, logger_name, level) -> bool:
        with self._lock:
            logger = self._loggers.get(logger_name)
            if logger is None:
                return False
            logger.set_level(level)
            return True

    def reset_level_of_logger(self, logger_name) -> bool:
        with self._lock:
            logger = self._loggers.get(logger_name)
            if logger is None:
                return False
            logger.set_level_from_group(logger.group)
            return True