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


class FuncConfigurator(Configurator):
    def __init__(self, func):
        self.func = func

    def apply_on(self, system):
        self.func(system)
        return ConfigResult()


def make_system(func):
    system = LoggingSystem(FuncConfigurator(func))
    return system, system.configure()


def hierarchy(system):
    system.make_sink(RecordingSink, "s1")
    system.make_sink(RecordingSink, "s2")
    system.make_group("root", None, "s1", Level.INFO)
    system.make_group("child", "root")
    system.make_group("grandchild", "child", None, Level.DEBUG)
    system.make_group("other", None, "s2", Level.WARN)


@pytest.fixture
def system():
    sys_, result = make_system(hierarchy)
    assert not result.has_error
    return sys_


def test_configure_twice_raises(system):
    with pytest.raises(RuntimeError):
        system.configure()


def test_get_logger_before_configure_raises():
    system = LoggingSystem(FuncConfigurator(hierarchy))
    with pytest.raises(RuntimeError):
        system.get_logger("log", "root")


def test_no_groups_is_error():
    _, result = make_system(lambda s: None)
    assert result.has_error
    assert result.message == "E: No one group is defined; Logging system is unworkable\n"


def test_undefined_sink_is_warning():
    def setup(s):
        s.make_group("g", None, "missing", Level.INFO)
    system, result = make_system(setup)
    assert result.has_warning
    assert not result.has_error
    assert result.message == "W: Group 'g' has undefined sink; Sink to nowhere will be used\n"
    assert system.get_group("g").sink is system.get_sink("*")


def test_group_without_parent_needs_level():
    system = LoggingSystem(FuncConfigurator(lambda s: None))
    with pytest.raises(ValueError):
        system.make_group("g", None, None, None)


def test_unknown_parent_raises():
    system = LoggingSystem(FuncConfigurator(lambda s: None))
    with pytest.raises(ValueError):
        system.make_group("g", "absent", None, Level.INFO)


def test_child_inherits(system):
    child = system.get_group("child")
    assert child.parent is system.get_group("root")
    assert child.level == Level.INFO
    assert child.sink is system.get_sink("s1")
    assert not child.is_level_overridden
    assert not child.is_sink_overridden


def test_first_group_is_fallback(system):
    assert system.get_fallback_group() is system.get_group("root")
    assert system.set_fallback_group("other")
    assert system.get_fallback_group() is system.get_group("other")
    assert not system.set_fallback_group("absent")


def test_get_logger_returns_same_instance(system):
    first = system.get_logger("log", "child")
    assert system.get_logger("log", "other") is first


def test_unknown_group_uses_fallback(system):
    system.set_fallback_group("other")
    logger = system.get_logger("L", "nope")
    assert logger.group is system.get_group("other")
    warning = system.get_sink("s2").records[-1]
    assert warning.name == "Soralog"
    assert warning.message == ("Group 'nope' for logger 'L' is not found. "
                               "Fallback group will be used (it is group 'other' right now).")


def test_default_group_name_rejected(system):
    with pytest.raises(ValueError):
        system.get_logger("L", "*")


def test_level_propagates(system):
    logger = system.get_logger("L", "child")
    assert system.set_level_of_group("root", Level.TRACE)
    assert system.get_group("child").level == Level.TRACE
    assert system.get_group("grandchild").level == Level.DEBUG
    assert logger.level == Level.TRACE
    assert system.reset_level_of_group("grandchild")
    assert system.get_group("grandchild").level == Level.TRACE


def test_sink_propagates(system):
    logger = system.get_logger("L", "grandchild")
    assert system.set_sink_of_group("root", "s2")
    assert system.get_group("child").sink is system.get_sink("s2")
    assert system.get_group("grandchild").sink is system.get_sink("s2")
    assert logger.sink is system.get_sink("s2")
    assert system.set_sink_of_group("child", "s1")
    assert logger.sink is system.get_sink("s1")
    assert system.reset_sink_of_group("child")
    assert logger.sink is system.get_sink("s2")
    assert not system.set_sink_of_group("child", "absent")
    assert not system.set_sink_of_group("absent", "s1")


def test_cycles_refused(system):
    assert not system.set_parent_of_group("root", "grandchild")
    assert not system.set_parent_of_group("child", "child")
    assert system.get_group("root").parent is None


def test_swap_parent_and_child(system):
    root, child = system.get_group("root"), system.get_group("child")
    assert system.set_parent_of_group("root", "child")
    assert root.parent is child
    assert child.parent is None


def test_reparent_updates_loggers(system):
    logger = system.get_logger("L", "child")
    assert system.set_parent_of_group("child", "other")
    child = system.get_group("child")
    assert child.level == Level.WARN
    assert child.sink is system.get_sink("s2")
    assert logger.level == Level.WARN
    assert logger.sink is system.get_sink("s2")
    assert system.get_group("grandchild").sink is system.get_sink("s2")


def test_unset_parent(system):
    assert system.unset_parent_of_group("child")
    child = system.get_group("child")
    assert child.parent is None
    assert child.is_level_overridden
    assert child.is_sink_overridden
    assert not system.unset_parent_of_group("absent")


def test_logger_changes_by_name(system):
    logger = system.get_logger("L", "root")
    assert system.set_group_of_logger("L", "other")
    assert logger.group is system.get_group("other")
    assert system.set_sink_of_logger("L", "s1")
    assert logger.sink is system.get_sink("s1")
    assert logger.is_sink_overridden
    assert system.reset_sink_of_logger("L")
    assert logger.sink is system.get_sink("s2")
    assert system.set_level_of_logger("L", Level.TRACE)
    assert logger.level == Level.TRACE
    assert system.reset_level_of_logger("L")
    assert logger.level == Level.WARN
    assert not logger.is_level_overridden


def test_unknown_names_return_false(system):
    assert not system.set_group_of_logger("absent", "root")
    assert not system.set_sink_of_logger("absent", "s1")
    assert not system.reset_sink_of_logger("absent")
    assert not system.set_level_of_logger("absent", Level.INFO)
    assert not system.reset_level_of_logger("absent")
    assert not system.set_level_of_group("absent", Level.INFO)
    assert not system.reset_level_of_group("absent")
    assert not system.reset_sink_of_group("absent")
    assert system.get_group("absent") is None
    assert system.get_sink("absent") is None


def test_make_sink_registers(system):
    sink = system.make_sink(RecordingSink, "s3")
    assert system.get_sink("s3") is sink
    assert sink.name == "s3"