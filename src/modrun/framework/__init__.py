"""
modrun framework - everything between the engine's function call and module code.

This package provides:
- Declarations for module code (``module_object``, ``function``, ``Argument``)
- The object registry
- Discovery, registration, argument binding and value decoding
- The entry point (``modrun.framework.entrypoint.Entrypoint``)
- Structured logging with invocation context

The entry point is not imported here; use
``from modrun.framework.entrypoint import Entrypoint``.
"""

from modrun.framework.attributes import Argument, function, module_object
from modrun.framework.registry import (
    clear_registry,
    get_object,
    list_objects,
    normalize_classname,
    register_object,
)

__all__ = [
    # Declarations
    "module_object",
    "function",
    "Argument",
    # Registry
    "register_object",
    "get_object",
    "list_objects",
    "clear_registry",
    "normalize_classname",
]
