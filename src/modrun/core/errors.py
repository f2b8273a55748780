"""
Structured error types for modrun.

Every failure the entry point can meet is one of four kinds, and the
hierarchy below makes the kind explicit so the bridge can decide what to do
with it without string matching:

- **Unsupported type:** raised while building the registration descriptor.
  Fatal. Registration aborts before any registration query is sent.
- **Structured engine error with extensions:** a ``QueryError`` whose
  ``extensions`` carry ``stdout``/``stderr``/``exitCode``. Recovered by the
  bridge and mapped onto the process streams and exit code.
- **Structured engine error without extensions:** a bare ``QueryError``.
  Propagated unchanged.
- **Everything else:** reported on the error stream, generic failure.

Nothing here is retryable. The bridge runs exactly once per process.

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────┐
        │                        ModrunError                          │
        │               (category, context, cause)                    │
        ├────────────────────────────────────────────────────────────┤
        │  ConfigError          DiscoveryError      RegistrationError │
        │       │                    │                     │          │
        │  MissingConfigError   ModuleSourceNotFound  UnsupportedType │
        │                                                             │
        │  DispatchError                        EngineError           │
        │       │                                    │                │
        │  ObjectNotFound   FunctionNotFound    QueryError            │
        │  BindingError     DecodeError         TransportError        │
        └────────────────────────────────────────────────────────────┘

Usage:
    from modrun.core.errors import UnsupportedTypeError

    raise UnsupportedTypeError("Currently cannot handle lists", type_name="list[str]")

Tags:
    error-handling, exception-hierarchy, error-context, modrun

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for log routing."""

    CONFIG = "CONFIG"  # Missing session settings, bad env
    DISCOVERY = "DISCOVERY"  # Module source tree lookup and import
    REGISTRATION = "REGISTRATION"  # Building the module declaration
    DISPATCH = "DISPATCH"  # Resolving and binding a call
    ENGINE = "ENGINE"  # Query errors, transport failures
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        object_name: Target object name of the invocation
        function_name: Method name of the invocation
        argument: Argument being processed when the error happened
        type_name: Type descriptor name involved in the error
        query: Rendered query that failed
        metadata: Anything else worth logging with the error
    """

    object_name: str | None = None
    function_name: str | None = None
    argument: str | None = None
    type_name: str | None = None
    query: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Non-empty fields, metadata flattened in."""
        result = {}
        for key in ["object_name", "function_name", "argument", "type_name", "query"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ModrunError(Exception):
    """
    Base exception for all modrun errors.

    Carries a category for routing, an ``ErrorContext`` for structured
    logging and an optional chained cause. Subclasses set
    ``default_category``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ModrunError:
        """
        Attach context fields and return the same error.

        Usage:
            raise BindingError("Missing").with_context(object_name="Ci")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Structured form used in log events."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ModrunError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """A setting the entry point needs has no value."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


# =============================================================================
# DISCOVERY ERRORS
# =============================================================================


class DiscoveryError(ModrunError):
    """Module source could not be scanned or imported."""

    default_category = ErrorCategory.DISCOVERY


class ModuleSourceNotFoundError(DiscoveryError):
    """No source directory was found above the start directory."""

    def __init__(self, dirname: str, start: str):
        self.dirname = dirname
        self.start = start
        super().__init__(f"Could not find a '{dirname}' directory at or above {start}")


# =============================================================================
# REGISTRATION ERRORS
# =============================================================================


class RegistrationError(ModrunError):
    """Module declaration could not be built."""

    default_category = ErrorCategory.REGISTRATION


class UnsupportedTypeError(RegistrationError):
    """A type descriptor has no engine representation."""

    def __init__(self, message: str, *, type_name: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.type_name = type_name
        if type_name is not None:
            self.context.type_name = type_name


# =============================================================================
# DISPATCH ERRORS
# =============================================================================


class DispatchError(ModrunError):
    """A call-mode invocation could not be dispatched."""

    default_category = ErrorCategory.DISPATCH


class ObjectNotFoundError(DispatchError):
    """Target object name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.object_name = name
        self.available = available or []
        listing = ", ".join(self.available) or "none"
        super().__init__(f"Object '{name}' not found. Available: {listing}")
        self.context.object_name = name


class FunctionNotFoundError(DispatchError):
    """Object has no exposed function with the requested name."""

    def __init__(self, object_name: str, function_name: str):
        self.object_name = object_name
        self.function_name = function_name
        super().__init__(f"Object '{object_name}' has no function '{function_name}'")
        self.context.object_name = object_name
        self.context.function_name = function_name


class BindingError(DispatchError):
    """Supplied arguments do not cover the declared parameters."""

    def __init__(self, message: str, *, missing_params: list[str] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.missing_params = missing_params or []

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.missing_params:
            result["missing_params"] = self.missing_params
        return result


class DecodeError(DispatchError):
    """A wire value could not be decoded into the declared type."""

    def __init__(self, message: str, *, value: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# ENGINE ERRORS
# =============================================================================


class EngineError(ModrunError):
    """Failure reported by, or while talking to, the engine."""

    default_category = ErrorCategory.ENGINE


class QueryError(EngineError):
    """
    Structured GraphQL error returned by the engine.

    ``extensions`` is the error's ``extensions`` object, empty when the engine
    sent none. Exec failures carry ``stdout``, ``stderr`` and ``exitCode``.
    """

    def __init__(
        self,
        message: str,
        *,
        extensions: dict[str, Any] | None = None,
        path: list[Any] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.extensions = extensions or {}
        self.path = path or []

    @classmethod
    def from_error(cls, error: dict[str, Any], query: str | None = None) -> QueryError:
        """Build from one entry of a GraphQL ``errors`` array."""
        exc = cls(
            str(error.get("message", "Unknown query error")),
            extensions=error.get("extensions"),
            path=error.get("path"),
        )
        if query is not None:
            exc.context.query = query
        return exc

    @property
    def has_extensions(self) -> bool:
        return bool(self.extensions)

    @property
    def stdout(self) -> str:
        return self.extensions.get("stdout") or ""

    @property
    def stderr(self) -> str:
        return self.extensions.get("stderr") or ""

    @property
    def exit_code(self) -> int | None:
        code = self.extensions.get("exitCode")
        return int(code) if code is not None else None

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.extensions:
            result["extensions"] = sorted(self.extensions)
        if self.path:
            result["path"] = self.path
        return result


class TransportError(EngineError):
    """HTTP or connection failure talking to the engine."""

    def __init__(self, message: str, *, response: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.response = response

    @property
    def response_body(self) -> str | None:
        if self.response is None:
            return None
        return self.response.text


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Category of any exception; anything not raised by modrun is INTERNAL."""
    if isinstance(error, ModrunError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ModrunError",
    # Config
    "ConfigError",
    "MissingConfigError",
    # Discovery
    "DiscoveryError",
    "ModuleSourceNotFoundError",
    # Registration
    "RegistrationError",
    "UnsupportedTypeError",
    # Dispatch
    "DispatchError",
    "ObjectNotFoundError",
    "FunctionNotFoundError",
    "BindingError",
    "DecodeError",
    # Engine
    "EngineError",
    "QueryError",
    "TransportError",
    # Utilities
    "categorize_error",
]
