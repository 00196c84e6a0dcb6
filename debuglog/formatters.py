"""
Robust value formatting for console logging.

Type-aware formatter that turns any Python value into a bounded, human-readable
string. Handles broken __str__, recursive objects, deeply nested containers and
huge strings gracefully: recursion is cut at max_depth, long strings are
truncated with a marker citing their length, and containers already seen during
a call render as "[Circular Reference]".

The fmt_any() function is the convenience entry point; ValueFormatter holds the
configuration for repeated use.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections
import collections.abc as abc
import datetime as dt
import numbers
import re
import traceback
import types
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Literal

# Third-party ----------------------------------------------------------------------------------------------------------
from colorama import Fore, Style

# Local ----------------------------------------------------------------------------------------------------------------
from .elements import DOM_PLACEHOLDER, DomElementFormat, format_element, is_element
from .environment import ExecutionContext
from .sentinels import UNDEFINED
from .utils import callable_name, class_name, safe_str, safe_repr

# Constants ------------------------------------------------------------------------------------------------------------

CIRCULAR_REFERENCE = "[Circular Reference]"
MAX_DEPTH_REACHED = "[Max Depth Reached]"

# Integers outside the signed 64-bit range are rendered as big integers
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

TEXTUAL_TYPES = (str, bytes, bytearray, memoryview)


# Classes --------------------------------------------------------------------------------------------------------------

class Palette:
    """
    ANSI decorations applied to rendered tokens when colors are enabled.

    Only leaf tokens are decorated; containers are assembled from already
    decorated parts and never re-colorized.
    """
    STRING = Fore.GREEN
    NUMBER = Fore.YELLOW
    BOOLEAN = Fore.MAGENTA
    NULL = Style.DIM
    KEY = Fore.CYAN
    BRACKET = Style.BRIGHT
    SENTINEL = Fore.RED
    RESET = Style.RESET_ALL


@dataclass(frozen=True)
class FormatOptions:
    """
    Configuration for ValueFormatter.

    Attributes:
        max_depth: Containers nested deeper than this render as "[Max Depth Reached]".
        max_string_length: Strings longer than this are truncated with a length marker.
        enable_circular_handling: Track visited containers and render repeats as
            "[Circular Reference]".
        dom_element_format: Element rendering mode, see DomElementFormat.
        pretty_print: Place each container entry on its own indented line.
        indent_size: Spaces per nesting level in pretty mode.
        colors: Decorate tokens with ANSI colors when the context supports it.

    Examples:
        >>> FormatOptions().merge(max_depth=2).max_depth
        2
        >>> FormatOptions.pretty().pretty_print
        True
    """
    max_depth: int = 5
    max_string_length: int = 10000
    enable_circular_handling: bool = True
    dom_element_format: DomElementFormat = DomElementFormat.SUMMARY
    pretty_print: bool = False
    indent_size: int = 2
    colors: bool = False

    def __post_init__(self) -> None:
        """Validate field types and ranges."""
        for name in ("max_depth", "max_string_length", "indent_size"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise TypeError(f"FormatOptions.{name} must be an int, got <{class_name(val)}>")
            if val < 0:
                raise ValueError(f"FormatOptions.{name} must be >=0, but got {val!r}")

        for name in ("enable_circular_handling", "pretty_print", "colors"):
            val = getattr(self, name)
            if not isinstance(val, bool):
                raise TypeError(f"FormatOptions.{name} must be a bool, got <{class_name(val)}>")

        try:
            dom_format = DomElementFormat(self.dom_element_format)
        except ValueError as e:
            valid = ", ".join(repr(m.value) for m in DomElementFormat)
            raise ValueError(
                f"FormatOptions.dom_element_format must be one of {valid}, but got {self.dom_element_format!r}"
            ) from e
        # Use object.__setattr__ to bypass frozen restriction
        object.__setattr__(self, "dom_element_format", dom_format)

    @classmethod
    def compact(cls) -> "FormatOptions":
        """Single-line output, the default."""
        return cls()

    @classmethod
    def pretty(cls) -> "FormatOptions":
        """Multi-line output with 2-space indentation."""
        return cls(pretty_print=True, indent_size=2)

    def merge(self, **kwargs: Any) -> "FormatOptions":
        """Return a validated copy with the given fields replaced."""
        unknown = set(kwargs) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"FormatOptions has no field(s): {', '.join(sorted(unknown))}")
        return replace(self, **kwargs)


class _FormatState:
    """
    Per-call traversal state.

    visited maps id() to the visited object itself, keeping it alive so its id
    cannot be recycled while the call runs. Entries are never removed: a
    container shared by two sibling branches is reported as circular too.
    """
    __slots__ = ("visited",)

    def __init__(self) -> None:
        self.visited: dict[int, Any] = {}

    def seen(self, obj: Any) -> bool:
        return id(obj) in self.visited

    def add(self, obj: Any) -> None:
        self.visited[id(obj)] = obj


class ValueFormatter:
    """
    Formats arbitrary values into bounded strings.

    The formatter holds configuration only; every call to format() builds its
    own traversal state, so one instance is safe to share between threads.

    Args:
        options: Formatting options. Defaults to the module options, see configure().
        context: Execution context. Defaults to ExecutionContext.detect().

    Dispatch Order (first match wins):
        - None → "null", UNDEFINED → "undefined"
        - depth beyond max_depth → "[Max Depth Reached]"
        - str → raw text, truncated beyond max_string_length
        - bool, numbers, enum members → literal form
        - callables → "[Function: name]"
        - elements → summary (UI-capable contexts only)
        - exceptions → "Name: message" plus traceback
        - date/time → ISO-8601, compiled regex → repr
        - sequences and sets → "[a, b]"
        - mappings and instances with __dict__ → "{key: value}"
        - everything else → str()

    Examples:
        >>> ValueFormatter(FormatOptions()).format({"a": 1, "b": [1, 2, 3]})
        '{a: 1, b: [1, 2, 3]}'

        >>> x = {}
        >>> x["self"] = x
        >>> ValueFormatter().format(x)
        '{self: [Circular Reference]}'
    """

    def __init__(self, options: FormatOptions | None = None, context: ExecutionContext | None = None) -> None:
        self.options = get_options() if options is None else options
        self.context = ExecutionContext.detect() if context is None else context
        self._colorize = self.options.colors and self.context.supports_ansi_color

    def format(self, value: Any) -> str:
        """Format value into a string. Never raises."""
        try:
            return self._format(value, 0, _FormatState())
        except RecursionError:
            # Interpreter stack is exhausted before max_depth
            return self._paint(MAX_DEPTH_REACHED, Palette.SENTINEL)

    __call__ = format

    # Dispatch ---------------------------------------------------------------------------------------------------------

    def _format(self, value: Any, depth: int, state: _FormatState) -> str:
        opts = self.options

        if value is None:
            return self._paint("null", Palette.NULL)

        if value is UNDEFINED:
            return self._paint("undefined", Palette.NULL)

        # Checked at entry of every call, whatever the type
        if depth > opts.max_depth:
            return self._paint(MAX_DEPTH_REACHED, Palette.SENTINEL)

        if isinstance(value, str):
            return self._format_str(value)

        # bool comes before int (is subclass of int), Enum before both (IntEnum)
        if isinstance(value, Enum):
            if value.name is None:
                # Unnamed Flag combination
                return safe_str(value)
            return f"{class_name(value)}.{value.name}"

        if isinstance(value, bool):
            return self._paint(str(value), Palette.BOOLEAN)

        if isinstance(value, int):
            return self._paint(_format_int(value), Palette.NUMBER)

        if isinstance(value, numbers.Number):
            return self._paint(safe_str(value), Palette.NUMBER)

        if callable(value):
            return f"[Function: {callable_name(value)}]"

        if is_element(value):
            if not self.context.is_ui_capable:
                return DOM_PLACEHOLDER
            return format_element(value, opts.dom_element_format)

        if isinstance(value, BaseException):
            return _format_exception(value)

        if isinstance(value, (dt.date, dt.time)):
            return value.isoformat()

        if isinstance(value, re.Pattern):
            return safe_repr(value)

        if _is_sequence(value):
            return self._format_sequence(value, depth, state)

        if _is_object(value):
            return self._format_object(value, depth, state)

        return safe_str(value)

    # Formatters -------------------------------------------------------------------------------------------------------

    def _format_str(self, s: str) -> str:
        max_len = self.options.max_string_length
        if len(s) <= max_len:
            return self._paint(s, Palette.STRING)

        head = self._paint(s[:max_len] + "...", Palette.STRING)
        marker = self._paint(f"[truncated, {len(s)} chars total]", Palette.SENTINEL)
        return f"{head} {marker}"

    def _format_sequence(self, seq: Any, depth: int, state: _FormatState) -> str:
        if self.options.enable_circular_handling:
            if state.seen(seq):
                return self._paint(CIRCULAR_REFERENCE, Palette.SENTINEL)
            state.add(seq)

        try:
            items = list(seq)
        except Exception as e:
            return _failed_to_stringify(e)

        parts = [self._format(item, depth + 1, state) for item in items]
        return self._wrap("[", "]", parts, depth)

    def _format_object(self, obj: Any, depth: int, state: _FormatState) -> str:
        if self.options.enable_circular_handling:
            if state.seen(obj):
                return self._paint(CIRCULAR_REFERENCE, Palette.SENTINEL)
            state.add(obj)

        # Some objects raise when introspected
        try:
            if isinstance(obj, abc.Mapping):
                entries = list(obj.items())
            else:
                entries = list(vars(obj).items())
        except Exception as e:
            return _failed_to_stringify(e)

        parts = [
            f"{self._paint(safe_str(key), Palette.KEY)}: {self._format(val, depth + 1, state)}"
            for key, val in entries
        ]
        return self._wrap("{", "}", parts, depth)

    # Layout -----------------------------------------------------------------------------------------------------------

    def _wrap(self, open_ch: str, close_ch: str, parts: list[str], depth: int) -> str:
        """Join rendered entries inside delimiters, compact or pretty."""
        if not parts:
            return self._paint(open_ch + close_ch, Palette.BRACKET)

        open_tok = self._paint(open_ch, Palette.BRACKET)
        close_tok = self._paint(close_ch, Palette.BRACKET)

        if not self.options.pretty_print:
            return open_tok + ", ".join(parts) + close_tok

        unit = " " * self.options.indent_size
        inner = unit * (depth + 1)
        outer = unit * depth
        body = ",\n".join(inner + p for p in parts)
        return f"{open_tok}\n{body}\n{outer}{close_tok}"

    def _paint(self, token: str, color: str) -> str:
        if not self._colorize:
            return token
        return f"{color}{token}{Palette.RESET}"


# Module Options -------------------------------------------------------------------------------------------------------

_options: FormatOptions = FormatOptions()


def configure(preset: Literal["compact", "pretty"] | None = None, **kwargs: Any) -> FormatOptions:
    """
    Update module default options used when no options are passed explicitly.

    Args:
        preset: Start from a named preset instead of the current module options.
        **kwargs: FormatOptions fields to override.

    Returns:
        FormatOptions: The new module options.

    Examples:
        >>> configure(preset="pretty", indent_size=4).indent_size
        4
    """
    global _options
    if preset is None:
        base = _options
    elif preset == "compact":
        base = FormatOptions.compact()
    elif preset == "pretty":
        base = FormatOptions.pretty()
    else:
        raise ValueError(f"unknown preset {preset!r}, expected 'compact' or 'pretty'")
    _options = base.merge(**kwargs)
    return _options


def get_options() -> FormatOptions:
    """Return the module default options."""
    return _options


def reset_options() -> FormatOptions:
    """Restore module default options to FormatOptions()."""
    global _options
    _options = FormatOptions()
    return _options


# Methods --------------------------------------------------------------------------------------------------------------

def fmt_any(obj: Any, *, opts: FormatOptions | None = None, context: ExecutionContext | None = None) -> str:
    """Format any object for console logging.

    Main entry point for formatting arbitrary Python objects with robust handling
    of edge cases like broken __str__, recursive objects and very long strings.

    Args:
        obj: Any Python object to format.
        opts: Formatting options. Defaults to the module options, see configure().
        context: Execution context. Defaults to ExecutionContext.detect().

    Returns:
        Formatted string, never raises.

    Examples:
        >>> fmt_any({"a": 1, "b": [1, 2, 3]})
        '{a: 1, b: [1, 2, 3]}'

        >>> fmt_any([1, [2, [3]]], opts=FormatOptions(max_depth=1))
        '[1, [[Max Depth Reached], [Max Depth Reached]]]'

        >>> fmt_any(ValueError("bad input"))
        'ValueError: bad input\\n'

    See Also:
        ValueFormatter: The formatter class with the full dispatch order.
    """
    return ValueFormatter(opts, context).format(obj)


def is_container(obj: Any) -> bool:
    """Check whether obj is rendered as a container (sequence, set, mapping or object)."""
    # Functions carry a __dict__ but render as [Function: name]
    if callable(obj):
        return False
    return _is_sequence(obj) or _is_object(obj)


# Private Methods ------------------------------------------------------------------------------------------------------

def _failed_to_stringify(exc: BaseException) -> str:
    reason = safe_str(exc) or class_name(exc)
    return f"[Object: failed to stringify - {reason}]"


def _format_exception(exc: BaseException) -> str:
    """Exception as "Name: message" and its traceback; never truncated."""
    message = safe_str(exc)
    try:
        stack = "".join(traceback.format_tb(exc.__traceback__)) if exc.__traceback__ else ""
    except Exception:
        stack = ""
    return f"{class_name(exc)}: {message}\n{stack}"


def _format_int(value: int) -> str:
    """Decimal literal; big integers get an "n" suffix."""
    if _INT64_MIN <= value <= _INT64_MAX:
        return int.__repr__(value)
    try:
        return f"{int.__repr__(value)}n"
    except ValueError:
        # Beyond sys.get_int_max_str_digits()
        return f"<big int: {value.bit_length()} bits>"


def _is_object(obj: Any) -> bool:
    """Mappings and instances carrying their own attribute dict."""
    if isinstance(obj, abc.Mapping):
        return True
    if isinstance(obj, types.ModuleType):
        return False
    try:
        return isinstance(getattr(obj, "__dict__", None), abc.Mapping)
    except Exception:
        # Enumeration itself will report the failure
        return True


def _is_sequence(obj: Any) -> bool:
    """Non-textual sequences, sets and deques."""
    if isinstance(obj, TEXTUAL_TYPES):
        return False
    return isinstance(obj, (abc.Sequence, abc.Set, collections.deque))
