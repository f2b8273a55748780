"""
Tests for modrun.framework.binding - call arguments to positional values.
"""

import json

import pytest

from modrun.client.objects import FunctionCallArgValue
from modrun.core.errors import BindingError, DecodeError
from modrun.framework.attributes import function
from modrun.framework.binding import bind_arguments
from modrun.framework.schema import ModuleObject


class Target:
    @function
    def f(self, a: str, b: int) -> str:
        return a * b

    @function
    def with_default(self, name: str, greeting: str = "hello") -> str:
        return f"{greeting} {name}"

    @function
    def none(self) -> str:
        return ""


def fn(name: str):
    return ModuleObject("Target", Target).get_function(name)


def args(*pairs: tuple[str, str]) -> list[FunctionCallArgValue]:
    return [FunctionCallArgValue(name, value) for name, value in pairs]


def decode(value, type):
    return json.loads(value)


class TestBindArguments:
    def test_declaration_order_not_supply_order(self):
        bound = bind_arguments(fn("f"), args(("b", "5"), ("a", '"x"')), decode)
        assert bound == ["x", 5]

    def test_supplied_order_matching(self):
        bound = bind_arguments(fn("f"), args(("a", '"x"'), ("b", "5")), decode)
        assert bound == ["x", 5]

    def test_first_match_wins(self):
        bound = bind_arguments(fn("f"), args(("a", '"first"'), ("a", '"second"'), ("b", "1")), decode)
        assert bound == ["first", 1]

    def test_unmatched_supplied_dropped(self):
        bound = bind_arguments(fn("f"), args(("a", '"x"'), ("c", "9"), ("b", "2")), decode)
        assert bound == ["x", 2]

    def test_no_parameters(self):
        assert bind_arguments(fn("none"), args(("extra", "1")), decode) == []

    def test_default_used_when_not_supplied(self):
        assert bind_arguments(fn("with_default"), args(("name", '"bob"')), decode) == ["bob", "hello"]

    def test_supplied_overrides_default(self):
        bound = bind_arguments(fn("with_default"), args(("greeting", '"hi"'), ("name", '"bob"')), decode)
        assert bound == ["bob", "hi"]

    def test_decode_receives_declared_type(self):
        seen = []

        def recording(value, type):
            seen.append((value, type.name))
            return json.loads(value)

        bind_arguments(fn("f"), args(("b", "5"), ("a", '"x"')), recording)

        assert seen == [('"x"', "str"), ("5", "int")]


class TestBindingErrors:
    def test_missing_required(self):
        with pytest.raises(BindingError) as exc_info:
            bind_arguments(fn("f"), args(("b", "5")), decode)

        e = exc_info.value
        assert e.missing_params == ["a"]
        assert str(e) == "Missing required arguments for 'f': a"
        assert e.context.function_name == "f"

    def test_all_missing_listed(self):
        with pytest.raises(BindingError, match="a, b"):
            bind_arguments(fn("f"), [], decode)

    def test_decode_error_gets_context(self):
        def failing(value, type):
            raise DecodeError("bad value", value=value)

        with pytest.raises(DecodeError) as exc_info:
            bind_arguments(fn("f"), args(("a", '"x"'), ("b", "5")), failing)

        assert exc_info.value.context.function_name == "f"
        assert exc_info.value.context.argument == "a"
