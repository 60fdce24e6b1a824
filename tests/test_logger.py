import pytest

from soralogpy.configurator import ConfigResult, Configurator
from soralogpy.event import Level, ThreadInfoType
from soralogpy.logging_system import LoggingSystem
from soralogpy.sink import Sink


class RecordingSink(Sink):
    def __init__(self, name):
        super().__init__(name, ThreadInfoType.NONE, 16, 256, 1024, 0)
        self.records = []

    def flush(self):
        self.records.extend(self._drain())

    def async_flush(self):
        self.flush()

    def rotate(self):
        pass


class SetupConfigurator(Configurator):
    def __init__(self):
        self.calls = 0

    def apply_on(self, system):
        self.calls += 1
        for name in ("sink1", "sink2", "sink3", "sink4"):
            system.make_sink(RecordingSink, name)
        system.make_group("first", None, "sink1", Level.TRACE)
        system.make_group("second", None, "sink2", Level.DEBUG)
        return ConfigResult()


@pytest.fixture
def env():
    configurator = SetupConfigurator()
    system = LoggingSystem(configurator)
    system.configure()
    assert configurator.calls == 1
    e = {
        "system": system,
        "group1": system.get_group("first"),
        "group2": system.get_group("second"),
        "sink1": system.get_sink("sink1"),
        "sink2": system.get_sink("sink2"),
        "sink3": system.get_sink("sink3"),
        "sink4": system.get_sink("sink4"),
    }
    e["log1"] = system.get_logger("log1", "first")
    e["log2"] = system.get_logger("log2", "first", "sink3")
    e["log3"] = system.get_logger("log3", "first", level=Level.INFO)
    e["log4"] = system.get_logger("log4", "first", "sink4", Level.VERBOSE)
    return e


def test_make_logger(env):
    log1, log2, log3, log4 = env["log1"], env["log2"], env["log3"], env["log4"]
    g1 = env["group1"]

    assert log1.group is g1
    assert log1.level == Level.TRACE
    assert not log1.is_level_overridden
    assert log1.sink is env["sink1"]
    assert not log1.is_sink_overridden

    assert log2.group is g1
    assert log2.level == Level.TRACE
    assert not log2.is_level_overridden
    assert log2.sink is env["sink3"]
    assert log2.is_sink_overridden

    assert log3.group is g1
    assert log3.level == Level.INFO
    assert log3.is_level_overridden
    assert log3.sink is env["sink1"]
    assert not log3.is_sink_overridden

    assert log4.group is g1
    assert log4.level == Level.VERBOSE
    assert log4.is_level_overridden
    assert log4.sink is env["sink4"]
    assert log4.is_sink_overridden


def test_change_level(env):
    logs = [env[f"log{i}"] for i in range(1, 5)]
    for log in logs:
        log.set_level(Level.CRITICAL)
    for log in logs:
        assert log.level == Level.CRITICAL
        assert log.is_level_overridden

    for log in logs:
        log.reset_level()
    for log in logs:
        assert log.level == Level.TRACE
        assert not log.is_level_overridden


def test_change_sink(env):
    logs = [env[f"log{i}"] for i in range(1, 5)]
    for log in logs:
        log.set_sink(env["sink2"])
    for log in logs:
        assert log.sink is env["sink2"]
        assert log.is_sink_overridden

    for log in logs:
        log.reset_sink()
    for log in logs:
        assert log.sink is env["sink1"]
        assert not log.is_sink_overridden


def test_change_group(env):
    g2 = env["group2"]
    for i in range(1, 5):
        env[f"log{i}"].set_group(g2)

    log1, log2, log3, log4 = env["log1"], env["log2"], env["log3"], env["log4"]

    assert log1.group is g2
    assert log1.level == Level.DEBUG
    assert not log1.is_level_overridden
    assert log1.sink is env["sink2"]
    assert not log1.is_sink_overridden

    assert log2.group is g2
    assert log2.level == Level.DEBUG
    assert not log2.is_level_overridden
    assert log2.sink is env["sink3"]
    assert log2.is_sink_overridden

    assert log3.group is g2
    assert log3.level == Level.INFO
    assert log3.is_level_overridden
    assert log3.sink is env["sink2"]
    assert not log3.is_sink_overridden

    assert log4.group is g2
    assert log4.level == Level.VERBOSE
    assert log4.is_level_overridden
    assert log4.sink is env["sink4"]
    assert log4.is_sink_overridden


def test_set_group_by_name(env):
    log1 = env["log1"]
    log1.set_group("second")
    assert log1.group is env["group2"]
    log1.set_group("no-such-group")
    assert log1.group is env["group2"]


def test_set_sink_by_name_ignores_unknown(env):
    log1 = env["log1"]
    log1.set_sink("sink4")
    assert log1.sink is env["sink4"]
    log1.set_sink("unknown")
    assert log1.sink is env["sink4"]


def test_level_from_other_group_is_overridden(env):
    log1 = env["log1"]
    log1.set_level_from_group("second")
    assert log1.level == Level.DEBUG
    assert log1.is_level_overridden
    log1.set_sink_from_group(env["group2"])
    assert log1.sink is env["sink2"]
    assert log1.is_sink_overridden


def test_log_reaches_sink(env):
    env["log1"].info("hello {}", "world")
    records = env["sink1"].records
    assert records[-1].message == "hello world"
    assert records[-1].level == Level.INFO
    assert records[-1].name == "log1"


def test_log_filtered_by_level(env):
    env["log3"].debug("too detailed")
    assert env["sink1"].records == []
    env["log3"].warn("shown")
    assert [e.message for e in env["sink1"].records] == ["shown"]


@pytest.mark.parametrize("method,level", [
    ("trace", Level.TRACE), ("debug", Level.DEBUG), ("verbose", Level.VERBOSE),
    ("info", Level.INFO), ("warn", Level.WARN), ("error", Level.ERROR),
    ("critical", Level.CRITICAL),
])
def test_level_methods(env, method, level):
    getattr(env["log1"], method)("msg {}", 1)
    event = env["sink1"].records[-1]
    assert event.level == level
    assert event.message == "msg 1"