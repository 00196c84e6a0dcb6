"""
Debuglog console logger.

Thin facade over ValueFormatter: level methods build a metadata prefix
(level tag, timestamp, caller location), format every value and hand one line
to a sink. Output is suppressed in production unless show_in_prod is set.

Example:
    >>> from debuglog.logger import logger
    >>> logger.info("payload", {"rows": 42, "tags": ["a", "b"]})
    [INFO] [2026-10-18T06:41:00.123Z] [app.py:12] payload {rows: 42, tags: [a, b]}
"""

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
import inspect
import logging
import os
import pprint
import sys
import textwrap
import threading
import time
import warnings
from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import IO, Any, Mapping, Protocol

# Third-party ----------------------------------------------------------------------------------------------------------
from colorama import Fore, Style, just_fix_windows_console

# Local ----------------------------------------------------------------------------------------------------------------
from .elements import DomElementFormat
from .environment import ExecutionContext, is_truthy
from .formatters import FormatOptions, ValueFormatter, is_container
from .utils import safe_repr

# Constants ------------------------------------------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

_FALSY = frozenset({"0", "false", "no", "off"})

UNKNOWN_CALLER = ("unknown", "unknown")


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Level(StrEnum):
    LOG = "log"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


LEVEL_COLORS = {
    Level.LOG: Fore.CYAN,
    Level.DEBUG: Fore.CYAN,
    Level.INFO: Fore.GREEN,
    Level.WARN: Fore.YELLOW,
    Level.ERROR: Fore.RED,
}


class Sink(Protocol):
    """Destination for finished log lines."""

    supports_ansi: bool

    def write(self, level: Level, line: str) -> None: ...


class StreamSink:
    """
    Console-like sink: warn and error go to the error stream, all other levels to the output stream.

    Streams default to sys.stdout / sys.stderr resolved at write time, so
    redirections done after construction are honored.
    """
    supports_ansi = True

    def __init__(self, out: IO[str] | None = None, err: IO[str] | None = None) -> None:
        self.out = out
        self.err = err
        self._lock = threading.Lock()
        just_fix_windows_console()

    def write(self, level: Level, line: str) -> None:
        if level in (Level.WARN, Level.ERROR):
            stream = self.err if self.err is not None else sys.stderr
        else:
            stream = self.out if self.out is not None else sys.stdout

        # One line per write, never interleaved
        with self._lock:
            stream.write(line + "\n")
            stream.flush()


class LoggingSink:
    """Forwards lines to a stdlib logging.Logger at the mapped level."""
    supports_ansi = False

    LEVELS = {
        Level.LOG: logging.INFO,
        Level.DEBUG: logging.DEBUG,
        Level.INFO: logging.INFO,
        Level.WARN: logging.WARNING,
        Level.ERROR: logging.ERROR,
    }

    def __init__(self, logger: logging.Logger | str | None = None) -> None:
        if isinstance(logger, logging.Logger):
            self.logger = logger
        else:
            self.logger = logging.getLogger(logger or "debuglog")

    def write(self, level: Level, line: str) -> None:
        self.logger.log(self.LEVELS[Level(level)], line)


@dataclass
class LoggerOptions:
    """
    Logger configuration.

    Attributes:
        show_in_prod: Emit output even when the context is not a development one.
        include_timestamp: Add an ISO-8601 UTC timestamp to the metadata.
        include_caller: Add the caller "file:line" to the metadata.
        format: Options passed to the ValueFormatter.
    """
    show_in_prod: bool = False
    include_timestamp: bool = True
    include_caller: bool = True
    format: FormatOptions = field(default_factory=FormatOptions)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LoggerOptions":
        """
        Build options from DEBUGLOG_* environment variables.

        Variables:
            DEBUGLOG_SHOW_IN_PROD, DEBUGLOG_INCLUDE_TIMESTAMP, DEBUGLOG_INCLUDE_CALLER,
            DEBUGLOG_CIRCULAR, DEBUGLOG_PRETTY: booleans ("1"/"true"/"yes"/"on" or "0"/"false"/"no"/"off")
            DEBUGLOG_MAX_DEPTH, DEBUGLOG_MAX_STRING_LENGTH, DEBUGLOG_INDENT: non-negative integers
            DEBUGLOG_DOM_FORMAT: "inspect", "summary" or "disabled"

        Unparseable values emit a RuntimeWarning and keep the default.
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        fmt = defaults.format

        fmt_kwargs = dict(
            max_depth=_env_int(environ, "DEBUGLOG_MAX_DEPTH", fmt.max_depth),
            max_string_length=_env_int(environ, "DEBUGLOG_MAX_STRING_LENGTH", fmt.max_string_length),
            indent_size=_env_int(environ, "DEBUGLOG_INDENT", fmt.indent_size),
            enable_circular_handling=_env_bool(environ, "DEBUGLOG_CIRCULAR", fmt.enable_circular_handling),
            pretty_print=_env_bool(environ, "DEBUGLOG_PRETTY", fmt.pretty_print),
        )

        dom_format = environ.get("DEBUGLOG_DOM_FORMAT")
        if dom_format is not None:
            try:
                fmt_kwargs["dom_element_format"] = DomElementFormat(dom_format.strip().lower())
            except ValueError:
                _warn_env("DEBUGLOG_DOM_FORMAT", dom_format)

        return cls(
            show_in_prod=_env_bool(environ, "DEBUGLOG_SHOW_IN_PROD", defaults.show_in_prod),
            include_timestamp=_env_bool(environ, "DEBUGLOG_INCLUDE_TIMESTAMP", defaults.include_timestamp),
            include_caller=_env_bool(environ, "DEBUGLOG_INCLUDE_CALLER", defaults.include_caller),
            format=fmt.merge(**fmt_kwargs),
        )


class Logger:
    """
    Console logger with structured value formatting.

    Args:
        options: Logger options. Defaults to LoggerOptions().
        context: Execution context. Defaults to ExecutionContext.detect().
        sink: Output sink. Defaults to a StreamSink on stdout/stderr.

    Examples:
        >>> log = Logger(LoggerOptions(include_timestamp=False, include_caller=False))
        >>> log.warn("disk almost full", {"free": 0.02})
        [WARN] disk almost full {free: 0.02}
    """

    def __init__(
            self,
            options: LoggerOptions | None = None,
            context: ExecutionContext | None = None,
            sink: Sink | None = None,
    ) -> None:
        self.options = LoggerOptions() if options is None else options
        self.sink = StreamSink() if sink is None else sink

        context = ExecutionContext.detect() if context is None else context
        if not getattr(self.sink, "supports_ansi", False):
            context = context.merge(supports_ansi_color=False)
        self.context = context

        self.formatter = ValueFormatter(self.options.format, self.context)
        self._group_depth = 0
        self._timers: dict[str, float] = {}

    @property
    def enabled(self) -> bool:
        """Whether output is emitted in the current context."""
        return self.context.is_development or self.options.show_in_prod

    # Levels -----------------------------------------------------------------------------------------------------------

    def log(self, *values: Any) -> None:
        self._log(Level.LOG, values)

    def debug(self, *values: Any) -> None:
        self._log(Level.DEBUG, values)

    def info(self, *values: Any) -> None:
        self._log(Level.INFO, values)

    def warn(self, *values: Any) -> None:
        self._log(Level.WARN, values)

    warning = warn

    def error(self, *values: Any) -> None:
        self._log(Level.ERROR, values)

    # Groups -----------------------------------------------------------------------------------------------------------

    def group(self, label: str) -> None:
        """Write label and indent following lines until group_end()."""
        if not self.enabled:
            return
        self._write(Level.LOG, label)
        self._group_depth += 1

    def group_end(self) -> None:
        if not self.enabled:
            return
        if self._group_depth > 0:
            self._group_depth -= 1

    # Timers -----------------------------------------------------------------------------------------------------------

    def time(self, label: str = "default") -> None:
        """Start a timer named label."""
        if not self.enabled:
            return
        if label in self._timers:
            warnings.warn(f"timer {label!r} already exists", RuntimeWarning, stacklevel=2)
            return
        self._timers[label] = time.perf_counter()

    def time_end(self, label: str = "default") -> float | None:
        """
        Stop the timer named label and write "label: <elapsed>ms".

        Returns:
            float | None: Elapsed milliseconds, or None if no such timer was running.
        """
        if not self.enabled:
            return None
        start = self._timers.pop(label, None)
        if start is None:
            warnings.warn(f"timer {label!r} does not exist", RuntimeWarning, stacklevel=2)
            return None
        elapsed_ms = (time.perf_counter() - start) * 1000
        self._write(Level.LOG, f"{label}: {elapsed_ms:.3f}ms")
        return elapsed_ms

    # Private ----------------------------------------------------------------------------------------------------------

    def _log(self, level: Level, values: tuple[Any, ...]) -> None:
        if not self.enabled:
            return

        parts = self._metadata(level)
        parts.extend(self.formatter.format(v) for v in values)
        line = " ".join(parts)

        if self.context.supports_ansi_color:
            color = LEVEL_COLORS[level]
            # Token resets inside the line restore the level color
            line = line.replace(Style.RESET_ALL, Style.RESET_ALL + color)
            line = f"{color}{line}{Style.RESET_ALL}"
        self._write(level, line)

        # UI frontends also get the raw containers for interactive inspection
        if self.context.is_ui_capable:
            raw = [v for v in values if is_container(v)]
            if raw:
                self._write_raw_objects(level, raw)

    def _metadata(self, level: Level) -> list[str]:
        meta = [f"[{level.upper()}]"]
        if self.options.include_timestamp:
            meta.append(f"[{_iso_timestamp()}]")
        if self.options.include_caller:
            file, line = self._caller_info()
            meta.append(f"[{file}:{line}]")
        return meta

    def _caller_info(self) -> tuple[str, str]:
        """Return (file basename, line) of the first frame outside debuglog."""
        if self.context.is_restricted_runtime:
            return UNKNOWN_CALLER

        frame = inspect.currentframe()
        try:
            while frame is not None:
                filename = frame.f_code.co_filename
                if os.path.dirname(os.path.abspath(filename)) != _PACKAGE_DIR:
                    return os.path.basename(filename), str(frame.f_lineno)
                frame = frame.f_back
        finally:
            # Break reference cycle with the frame
            del frame
        return UNKNOWN_CALLER

    def _write_raw_objects(self, level: Level, raw: list[Any]) -> None:
        self._write(level, "Raw Objects")
        self._group_depth += 1
        try:
            for obj in raw:
                try:
                    text = pprint.pformat(obj, depth=self.options.format.max_depth + 1)
                except Exception:
                    text = safe_repr(obj)
                self._write(level, text)
        finally:
            self._group_depth -= 1

    def _write(self, level: Level, text: str) -> None:
        if self._group_depth:
            text = textwrap.indent(text, "  " * self._group_depth, lambda _: True)
        self.sink.write(level, text)


# Methods --------------------------------------------------------------------------------------------------------------

def _iso_timestamp() -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    if is_truthy(raw):
        return True
    if raw.strip().lower() in _FALSY:
        return False
    _warn_env(name, raw)
    return default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        _warn_env(name, raw)
        return default
    if value < 0:
        _warn_env(name, raw)
        return default
    return value


def _warn_env(name: str, raw: str) -> None:
    warnings.warn(f"ignoring invalid {name}={raw!r}, using default", RuntimeWarning, stacklevel=2)


# Default Instance -----------------------------------------------------------------------------------------------------

logger = Logger()
