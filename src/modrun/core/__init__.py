"""
modrun core - errors and settings shared by the client and the framework.
"""

from modrun.core.errors import (
    BindingError,
    ConfigError,
    DecodeError,
    DiscoveryError,
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
)
from modrun.core.settings import ModrunSettings, get_settings

__all__ = [
    "ModrunError",
    "ErrorCategory",
    "ErrorContext",
    "ConfigError",
    "MissingConfigError",
    "DiscoveryError",
    "ModuleSourceNotFoundError",
    "RegistrationError",
    "UnsupportedTypeError",
    "DispatchError",
    "ObjectNotFoundError",
    "FunctionNotFoundError",
    "BindingError",
    "DecodeError",
    "EngineError",
    "QueryError",
    "TransportError",
    "ModrunSettings",
    "get_settings",
]
