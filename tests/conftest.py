#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debuglog.environment import ExecutionContext
from debuglog.formatters import reset_options


# Classes --------------------------------------------------------------------------------------------------------------

class ListSink:
    """Sink collecting (level, line) pairs in memory."""

    def __init__(self, supports_ansi: bool = True):
        self.supports_ansi = supports_ansi
        self.records: list[tuple[str, str]] = []

    def write(self, level, line: str) -> None:
        self.records.append((str(level), line))

    @property
    def lines(self) -> list[str]:
        return [line for _, line in self.records]


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def module_options():
    """Keep module-level formatter options isolated between tests."""
    reset_options()
    yield
    reset_options()


@pytest.fixture
def plain() -> ExecutionContext:
    """Context without colors, UI or restrictions."""
    return ExecutionContext.plain()


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def sink_factory():
    """Build sinks with custom ANSI support."""
    return ListSink
