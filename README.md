# soralogpy

A logging system built from three kinds of object:

- **Sinks** say where records go: `SinkToConsole`, `SinkToFile`, `SinkToSyslog` and
  `SinkToNowhere` (all in their own modules; `SinkToNowhere` and `Multisink` live in
  `soralogpy.sink`). A `Multisink` sends each record to several sinks. Sinks collect
  events in a bounded queue and write them out at once (latency `0`) or from a
  background worker after a set latency in milliseconds.
- **Groups** (`soralogpy.logging_system.Group`) hold a level and a sink. A group can
  inherit both from a parent group. When you change a group through the
  `LoggingSystem`, the change reaches its child groups and their loggers, unless one
  of them has overridden that setting.
- **Loggers** (`soralogpy.logger.Logger`) are named handles. Each logger belongs to a
  group. You can override a logger's level or sink, and reset it later to what the
  group gives.

## Installation

```
pip install soralogpy
```

No third-party packages are needed. `SinkToSyslog` uses the standard `syslog`
module, so it is available on POSIX systems only.

## Usage

```python
from soralogpy.configurator import Configurator, ConfigResult
from soralogpy.event import Level
from soralogpy.logging_system import LoggingSystem
from soralogpy.sink_to_console import SinkToConsole, Stream


class MyConfigurator(Configurator):
    def apply_on(self, system):
        system.make_sink(SinkToConsole, "console", Stream.STDOUT, True)
        system.make_group("main", None, "console", Level.INFO)
        system.make_group("network", "main", None, None)
        return ConfigResult()


system = LoggingSystem(MyConfigurator())
result = system.configure()
if result.message:
    print(result.message)

log = system.get_logger("net", "network", None, None)
log.info("connected to {} in {} ms", "peer-1", 42)
log.debug("not shown: level of group 'main' is INFO")

system.set_level_of_group("main", Level.DEBUG)
log.debug("now shown")
log.flush()
```

A few rules worth knowing:

- `configure()` can be called once only; a second call raises `RuntimeError`, and
  `get_logger()` before `configure()` raises `RuntimeError` too. `configure()`
  returns a `ConfigResult` whose `has_error` is set when no group is defined, and
  whose `has_warning` is set when a group ends up with the sink to nowhere;
  `message` explains each case.
- The first group made becomes the fallback group; `set_fallback_group()` changes
  it. Asking `get_logger()` for an unknown group gives a logger in the fallback
  group and a warning from the logger `Soralog`. Asking for the group `"*"` raises
  `ValueError` (unless Python runs with `-O`).
- A group without a parent needs a level. A sink name that is not registered
  leaves the group on the sink to nowhere.
- `get_logger()` returns the same logger for the same name as long as the caller
  keeps a reference to it; loggers are held weakly.
- The `set_*`/`reset_*` methods of `LoggingSystem` take names and return `False`
  when a name is unknown. `set_parent_of_group()` also refuses to make a cycle.

Messages use `str.format`-style placeholders. If a message cannot be formatted,
an error record from the logger `Soralog` is written in its place. Messages longer
than the sink's maximum message length are cut short, and logger names longer than
32 characters are cut too.

### Sinks

| Sink | Defaults (events, message length, buffer, latency ms) |
|------|------|
| `SinkToConsole(name, stream_type, with_color, ...)` | 64, 1024, 128 KiB, 200 |
| `SinkToFile(name, path, ...)` | 2048, 1024, 4 MiB, 1000 |
| `SinkToSyslog(name, ident, ...)` | 2048, 1024, 4 MiB, 1000 |

Every sink has `flush()`, `async_flush()`, `rotate()` and `close()`, and can be
used as a context manager; `close()` writes out what is queued and stops the
worker. Only one `SinkToSyslog` may be open at a time; opening a second raises
`RuntimeError`. Trace-level events are not sent to syslog.

### Record layout

Console and file sinks write one line per event:

```
YY.MM.DD HH:MM:SS.uuuuuu  [thread]  Level     logger-name  message
```

The thread column holds the thread name (padded to 15 characters) or `T:<number>`,
or is left out; choose with `ThreadInfoType` (`NONE`, `NAME`, `ID`). With colour
on, `SinkToConsole` adds ANSI colours by level and bold or italic text.

### Rotation

`SinkToFile.rotate()` reopens the log file at the next flush. Call it after an
external tool has moved the file away. If the file cannot be opened, the problem
is reported on standard error and records are dropped.

## What it does not do

There is no configurator that reads a configuration file, and no ready-made
configurator at all: you set up sinks and groups by writing a `Configurator`
subclass, as above. There is no command-line tool.