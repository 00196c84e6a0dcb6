#
# Debuglog - Utils Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import functools
from dataclasses import dataclass

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debuglog.utils import callable_name, class_name, safe_repr, safe_str


# Local Classes & Methods ----------------------------------------------------------------------------------------------

@dataclass
class AnyData:
    value: int = 0

    class Inner:
        pass


class BrokenText:
    def __str__(self):
        raise ValueError("no str")

    def __repr__(self):
        raise KeyError("no repr")


def named(a, b=1):
    return a + b


# Tests ----------------------------------------------------------------------------------------------------------------

class TestClassName:
    @pytest.mark.parametrize(
        "obj, fully_qualified, expected",
        [
            pytest.param(int, False, "int", id="builtin-class"),
            pytest.param(10, False, "int", id="builtin-instance"),
            pytest.param(10, True, "int", id="builtin-never-qualified"),
            pytest.param(None, False, "NoneType", id="none"),
            pytest.param(AnyData, False, "AnyData", id="class"),
            pytest.param(AnyData(), False, "AnyData", id="instance"),
            pytest.param(AnyData(), True, f"{__name__}.AnyData", id="instance-fq"),
            pytest.param(AnyData.Inner, True, f"{__name__}.AnyData.Inner", id="nested-fq"),
        ],
    )
    def test_names(self, obj, fully_qualified, expected):
        assert class_name(obj, fully_qualified=fully_qualified) == expected


class TestCallableName:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(named, "named", id="function"),
            pytest.param(lambda: None, "anonymous", id="lambda"),
            pytest.param(len, "len", id="builtin"),
            pytest.param(functools.partial(named, 1), "named", id="partial"),
            pytest.param(functools.partial(functools.partial(named), 1), "named", id="nested-partial"),
            pytest.param(AnyData, "AnyData", id="class"),
            pytest.param(str.upper, "upper", id="method-descriptor"),
        ],
    )
    def test_names(self, obj, expected):
        assert callable_name(obj) == expected

    def test_nameless_callable(self):
        class Handler:
            def __call__(self):
                pass

        assert callable_name(Handler()) == "anonymous"


class TestSafeText:
    def test_safe_str_ok(self):
        assert safe_str([1, 2]) == "[1, 2]"

    def test_safe_str_broken(self):
        assert safe_str(BrokenText()) == "<BrokenText object (str failed: ValueError)>"

    def test_safe_repr_ok(self):
        assert safe_repr("a") == "'a'"

    def test_safe_repr_broken(self):
        assert safe_repr(BrokenText()) == "<BrokenText object (repr failed: KeyError)>"
