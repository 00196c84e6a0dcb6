"""
Sentinel objects for values that are absent rather than None.

Python has a single null value, so the formatter needs a separate marker for
"no value at all". UNDEFINED fills that role: it renders as ``undefined`` while
None renders as ``null``. The sentinel uses identity checks (using 'is') rather
than equality checks.

Sentinels:
    UNDEFINED: Represents an absent value (distinguishes from None)

Helper Functions:
    ifundefined: Return default if value is UNDEFINED, otherwise return value

Example:
    >>> from debuglog.formatters import fmt_any
    >>> row = {"name": "Alice"}
    >>> fmt_any(row.get("email", UNDEFINED))
    'undefined'
"""

from typing import Any, Callable, Final

__all__ = [
    'UNDEFINED',
    'UndefinedType',
    'ifundefined',
]


# Sentinel Types -------------------------------------------------------------------------------------------------------

class UndefinedType:
    """
    Sentinel type for UNDEFINED.

    Singleton optimized for identity checks, falsy, and pickle-safe.
    """
    __slots__ = ()

    _instance: 'UndefinedType | None' = None

    def __new__(cls) -> 'UndefinedType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<UNDEFINED>'

    def __eq__(self, other: Any) -> bool:
        """Ensures identity-based comparison."""
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


# Sentinel Objects -----------------------------------------------------------------------------------------------------

UNDEFINED: Final[UndefinedType] = UndefinedType()
"""
Sentinel representing an absent value.

Use with identity check: `if value is UNDEFINED:`
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def ifundefined(
        value: Any,
        *,
        default: Any = None,
        default_factory: Callable[[], Any] | None = None
) -> Any:
    """
    Return default if value is UNDEFINED, otherwise return value.

    Args:
        value: The value to check.
        default: Static default returned when value is UNDEFINED.
        default_factory: Callable producing the default lazily; takes precedence over default.

    Raises:
        ValueError: If both default and default_factory are provided.

    Examples:
        >>> ifundefined(UNDEFINED, default=0)
        0
        >>> ifundefined(None, default=0) is None
        True
    """
    if default is not None and default_factory is not None:
        raise ValueError("cannot specify both default and default_factory")
    if value is not UNDEFINED:
        return value
    if default_factory is not None:
        return default_factory()
    return default
