"""
Execution context descriptor for debuglog.

The formatter and the logger never sniff globals while running. Instead they
receive an ExecutionContext built once at construction, either explicitly or
via ExecutionContext.detect().
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
import sys
from dataclasses import dataclass, replace
from typing import IO, Any, Mapping

# Constants ------------------------------------------------------------------------------------------------------------

ENV_VARS = ("DEBUGLOG_ENV", "PYTHON_ENV")
PRODUCTION = "production"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ExecutionContext:
    """
    Capabilities of the environment the logger writes into.

    Attributes:
        is_ui_capable: Host can display rich UI elements (e.g. a notebook frontend).
            Element summaries are only rendered in such contexts.
        supports_ansi_color: Output sink understands ANSI escape sequences.
        is_restricted_runtime: Sandboxed or edge-like runtime; stack inspection and
            colors are avoided.
        is_development: Logs are emitted only in development unless the logger
            is configured with show_in_prod.
    """

    is_ui_capable: bool = False
    supports_ansi_color: bool = False
    is_restricted_runtime: bool = False
    is_development: bool = True

    def __post_init__(self):
        # Restricted runtimes never get escape sequences
        if self.is_restricted_runtime and self.supports_ansi_color:
            object.__setattr__(self, "supports_ansi_color", False)

    # Presets ----------------------------------------------------------------------------------------------------------

    @classmethod
    def plain(cls) -> "ExecutionContext":
        """Generic runtime without colors or UI."""
        return cls()

    @classmethod
    def terminal(cls) -> "ExecutionContext":
        """Interactive terminal with ANSI color support."""
        return cls(supports_ansi_color=True)

    @classmethod
    def notebook(cls) -> "ExecutionContext":
        """UI-capable frontend such as a Jupyter notebook."""
        return cls(is_ui_capable=True)

    @classmethod
    def restricted(cls) -> "ExecutionContext":
        """Sandboxed or edge-like runtime."""
        return cls(is_restricted_runtime=True)

    def merge(self, **kwargs: Any) -> "ExecutionContext":
        """Return a copy with the given fields replaced."""
        return replace(self, **kwargs)

    # Detection --------------------------------------------------------------------------------------------------------

    @classmethod
    def detect(cls, stream: IO[str] | None = None, environ: Mapping[str, str] | None = None) -> "ExecutionContext":
        """
        Detect the current execution context.

        Args:
            stream: The stream color support is checked against. Defaults to sys.stdout.
            environ: Environment mapping. Defaults to os.environ.

        Returns:
            ExecutionContext: Capabilities of the current process.

        Detection Logic:
            - is_restricted_runtime: DEBUGLOG_RESTRICTED is truthy or sys.platform is "emscripten"
            - is_ui_capable: an IPython kernel is loaded
            - supports_ansi_color: NO_COLOR unset, and FORCE_COLOR set or the stream is a TTY
            - is_development: DEBUGLOG_ENV (fallback PYTHON_ENV) is not "production"
        """
        environ = os.environ if environ is None else environ
        stream = sys.stdout if stream is None else stream

        restricted = is_truthy(environ.get("DEBUGLOG_RESTRICTED")) or sys.platform == "emscripten"
        ui_capable = "ipykernel" in sys.modules

        if "NO_COLOR" in environ:
            ansi = False
        elif environ.get("FORCE_COLOR"):
            ansi = True
        else:
            ansi = _is_tty(stream)

        return cls(
            is_ui_capable=ui_capable,
            supports_ansi_color=ansi,
            is_restricted_runtime=restricted,
            is_development=_environment_name(environ) != PRODUCTION,
        )


# Methods --------------------------------------------------------------------------------------------------------------

def is_truthy(value: str | None) -> bool:
    """Check an environment flag value: "1", "true", "yes" or "on" (case-insensitive)."""
    return value is not None and value.strip().lower() in _TRUTHY


# Private Methods ------------------------------------------------------------------------------------------------------

def _environment_name(environ: Mapping[str, str]) -> str:
    for name in ENV_VARS:
        value = environ.get(name)
        if value:
            return value.strip().lower()
    return ""


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (ValueError, OSError):
        # Closed or detached stream
        return False
