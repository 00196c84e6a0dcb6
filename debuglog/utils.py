"""
Debuglog utilities shared across the package.

Contains name and string helpers used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import functools
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.
    Builtin classes are never module-qualified.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the fully qualified name for user objects or classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'

        >>> class C: ...
        >>> class_name(C, fully_qualified=True)
        'debuglog.utils.C'
    """
    cls = obj if isinstance(obj, type) else type(obj)

    if fully_qualified and cls.__module__ != "builtins":
        return cls.__module__ + "." + cls.__qualname__
    return cls.__name__


def callable_name(obj: Any) -> str:
    """
    Get the display name of a callable, or 'anonymous' when it has none.

    Lambdas count as anonymous. A functools.partial takes the name of the
    function it wraps.

    Examples:
        >>> callable_name(len)
        'len'
        >>> callable_name(lambda: 0)
        'anonymous'
    """
    while isinstance(obj, functools.partial):
        obj = obj.func

    try:
        name = getattr(obj, "__name__", None)
    except Exception:
        name = None

    if not isinstance(name, str) or not name or name == "<lambda>":
        return "anonymous"
    return name


def safe_str(obj: Any) -> str:
    """
    Defensive str() call - handle broken __str__ methods gracefully
    """
    try:
        return str(obj)
    except Exception as e:
        # Fallback for broken __str__: show type and exception info
        return f"<{class_name(obj)} object (str failed: {type(e).__name__})>"


def safe_repr(obj: Any) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        return repr(obj)
    except Exception as e:
        return f"<{class_name(obj)} object (repr failed: {type(e).__name__})>"
