"""Tests for modrun.core.errors module."""

import httpx
import pytest

from modrun.core.errors import (
    BindingError,
    ConfigError,
    DecodeError,
    DispatchError,
    EngineError,
    ErrorCategory,
    ErrorContext,
    FunctionNotFoundError,
    MissingConfigError,
    ModrunError,
    ModuleSourceNotFoundError,
    ObjectNotFoundError,
    QueryError,
    RegistrationError,
    TransportError,
    UnsupportedTypeError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_empty_context_is_empty_dict(self):
        assert ErrorContext().to_dict() == {}

    def test_set_fields_only(self):
        ctx = ErrorContext(object_name="Ci", function_name="build")
        assert ctx.to_dict() == {"object_name": "Ci", "function_name": "build"}

    def test_metadata_merged(self):
        ctx = ErrorContext(argument="msg", metadata={"attempt": 1})
        assert ctx.to_dict() == {"argument": "msg", "attempt": 1}


class TestModrunError:
    """Test the base error."""

    def test_default_category_internal(self):
        assert ModrunError("boom").category == ErrorCategory.INTERNAL

    def test_explicit_category(self):
        e = ModrunError("boom", category=ErrorCategory.ENGINE)
        assert e.category == ErrorCategory.ENGINE

    def test_message_is_str(self):
        assert str(ModrunError("boom")) == "boom"

    def test_cause_chained(self):
        cause = ValueError("inner")
        e = ModrunError("outer", cause=cause)
        assert e.cause is cause
        assert e.__cause__ is cause

    def test_with_context_known_and_unknown_keys(self):
        e = ModrunError("boom").with_context(object_name="Ci", extra="x")
        assert e.context.object_name == "Ci"
        assert e.context.metadata == {"extra": "x"}

    def test_with_context_returns_self(self):
        e = ModrunError("boom")
        assert e.with_context(argument="a") is e

    def test_to_dict(self):
        e = ModrunError("boom", cause=KeyError("k")).with_context(function_name="f")
        d = e.to_dict()
        assert d["error_type"] == "ModrunError"
        assert d["message"] == "boom"
        assert d["category"] == "INTERNAL"
        assert d["context"] == {"function_name": "f"}
        assert "k" in d["cause"]

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestSubclassCategories:
    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (MissingConfigError("session_port"), ErrorCategory.CONFIG),
            (ModuleSourceNotFoundError("src", "/tmp"), ErrorCategory.DISCOVERY),
            (UnsupportedTypeError("nope"), ErrorCategory.REGISTRATION),
            (ObjectNotFoundError("Ci"), ErrorCategory.DISPATCH),
            (BindingError("missing"), ErrorCategory.DISPATCH),
            (DecodeError("bad"), ErrorCategory.DISPATCH),
            (QueryError("failed"), ErrorCategory.ENGINE),
            (TransportError("down"), ErrorCategory.ENGINE),
        ],
    )
    def test_category(self, error, category):
        assert error.category == category

    def test_hierarchy(self):
        assert issubclass(UnsupportedTypeError, RegistrationError)
        assert issubclass(FunctionNotFoundError, DispatchError)
        assert issubclass(QueryError, EngineError)
        assert issubclass(TransportError, EngineError)


class TestSpecificErrors:
    def test_missing_config_default_message(self):
        e = MissingConfigError("session_port")
        assert e.key == "session_port"
        assert "session_port" in str(e)

    def test_source_not_found_message(self):
        e = ModuleSourceNotFoundError("src", "/work")
        assert str(e) == "Could not find a 'src' directory at or above /work"

    def test_unsupported_type_records_type_name(self):
        e = UnsupportedTypeError("Currently cannot handle lists", type_name="list[str]")
        assert e.type_name == "list[str]"
        assert e.context.type_name == "list[str]"

    def test_object_not_found_lists_available(self):
        e = ObjectNotFoundError("Nope", ["Ci", "tools:Lint"])
        assert str(e) == "Object 'Nope' not found. Available: Ci, tools:Lint"
        assert e.context.object_name == "Nope"

    def test_object_not_found_none_available(self):
        assert str(ObjectNotFoundError("Nope")).endswith("Available: none")

    def test_function_not_found(self):
        e = FunctionNotFoundError("Ci", "deploy")
        assert str(e) == "Object 'Ci' has no function 'deploy'"
        assert e.context.function_name == "deploy"

    def test_binding_error_to_dict(self):
        e = BindingError("Missing", missing_params=["a", "b"])
        assert e.to_dict()["missing_params"] == ["a", "b"]

    def test_decode_error_to_dict_repr_value(self):
        e = DecodeError("bad", value='"x"')
        assert e.to_dict()["value"] == repr('"x"')


class TestQueryError:
    def test_from_error_with_extensions(self):
        e = QueryError.from_error(
            {
                "message": "exit code: 3",
                "path": ["container", "withExec", "stdout"],
                "extensions": {"stdout": "S", "stderr": "E", "exitCode": 3},
            },
            query="query { x }",
        )
        assert e.message == "exit code: 3"
        assert e.has_extensions
        assert e.stdout == "S"
        assert e.stderr == "E"
        assert e.exit_code == 3
        assert e.path == ["container", "withExec", "stdout"]
        assert e.context.query == "query { x }"

    def test_from_error_without_extensions(self):
        e = QueryError.from_error({"message": "no such field"})
        assert not e.has_extensions
        assert e.stdout == ""
        assert e.stderr == ""
        assert e.exit_code is None

    def test_from_error_missing_message(self):
        assert QueryError.from_error({}).message == "Unknown query error"

    def test_to_dict_lists_extension_keys(self):
        e = QueryError("x", extensions={"stderr": "E", "exitCode": 1})
        assert e.to_dict()["extensions"] == ["exitCode", "stderr"]


class TestTransportError:
    def test_response_body(self):
        response = httpx.Response(502, text="bad gateway")
        assert TransportError("down", response=response).response_body == "bad gateway"

    def test_no_response(self):
        assert TransportError("down").response_body is None


class TestCategorizeError:
    def test_modrun_error(self):
        assert categorize_error(BindingError("x")) == ErrorCategory.DISPATCH

    def test_other_error(self):
        assert categorize_error(RuntimeError("x")) == ErrorCategory.INTERNAL
