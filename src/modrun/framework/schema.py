"""Declared schema of module objects.

Manifesto:
    Signatures are read once per class, the first time the object is
    needed, and frozen into ``ModuleFunction`` / ``ModuleArgument`` records.
    Registration and argument binding both work from these records, so the
    two modes can never disagree about parameter order, names or defaults.

Tags:
    modrun, framework, schema, declarations

Doc-Types:
    api-reference
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from modrun.core.errors import FunctionNotFoundError, RegistrationError
from modrun.framework.types import Type, unwrap_annotated

FUNCTION_ATTR = "__modrun_function__"


@dataclass(frozen=True)
class FunctionMeta:
    """Marker stored on an exposed method."""

    description: str | None = None


@dataclass(frozen=True)
class Argument:
    """``Annotated`` metadata describing a parameter."""

    description: str | None = None


@dataclass(frozen=True)
class ModuleArgument:
    """One declared parameter, in declaration order."""

    name: str
    type: Type
    description: str | None = None
    default: Any = None
    has_default: bool = False


@dataclass(frozen=True)
class ModuleFunction:
    """One exposed method."""

    name: str
    return_type: Type
    description: str | None = None
    arguments: tuple[ModuleArgument, ...] = field(default_factory=tuple)

    @property
    def argument_names(self) -> list[str]:
        return [a.name for a in self.arguments]


class ModuleObject:
    """A registered class and its exposed functions."""

    def __init__(self, name: str, cls: type):
        self.name = name
        self.cls = cls

    @cached_property
    def functions(self) -> tuple[ModuleFunction, ...]:
        return tuple(build_function(attr, method) for attr, method in exposed_methods(self.cls))

    def get_function(self, name: str) -> ModuleFunction:
        for fn in self.functions:
            if fn.name == name:
                return fn
        raise FunctionNotFoundError(self.name, name)

    @property
    def qualified_name(self) -> str:
        return f"{self.cls.__module__}.{self.cls.__qualname__}"

    def __repr__(self) -> str:
        return f"ModuleObject({self.name!r}, {self.qualified_name})"


def exposed_methods(cls: type) -> list[tuple[str, Any]]:
    """Marked methods of ``cls`` in definition order, base classes first."""
    members: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if inspect.isfunction(value) and getattr(value, FUNCTION_ATTR, None) is not None:
                members[attr] = value
            elif attr in members:
                # Overridden without the marker
                del members[attr]
    return list(members.items())


def _description(method: Any) -> str | None:
    meta: FunctionMeta = getattr(method, FUNCTION_ATTR)
    if meta.description is not None:
        return meta.description
    doc = inspect.getdoc(method)
    if not doc:
        return None
    return doc.split("\n\n", 1)[0].strip()


def build_function(name: str, method: Any) -> ModuleFunction:
    """Freeze the signature of an exposed method."""
    try:
        hints = typing.get_type_hints(method, include_extras=True)
    except (NameError, TypeError) as e:
        raise RegistrationError(
            f"Cannot resolve annotations of {method.__qualname__}: {e}", cause=e
        ).with_context(function_name=name) from e

    params = list(inspect.signature(method).parameters.values())[1:]  # self

    arguments = []
    for param in params:
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            raise RegistrationError(
                f"{method.__qualname__}: parameter '{param.name}' must be positional"
            ).with_context(function_name=name, argument=param.name)

        annotation = hints.get(param.name, inspect.Parameter.empty)
        _, meta = unwrap_annotated(annotation)
        described = next((m for m in meta if isinstance(m, Argument)), None)
        has_default = param.default is not inspect.Parameter.empty

        arguments.append(
            ModuleArgument(
                name=param.name,
                type=Type.from_annotation(annotation),
                description=described.description if described else None,
                default=param.default if has_default else None,
                has_default=has_default,
            )
        )

    return ModuleFunction(
        name=name,
        return_type=Type.from_annotation(hints.get("return", inspect.Parameter.empty)),
        description=_description(method),
        arguments=tuple(arguments),
    )
