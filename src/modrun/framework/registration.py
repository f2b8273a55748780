"""Registration mode: declaring the module's callable surface.

Two steps:

1. ``build_registration`` turns discovered objects into an immutable
   ``RegistrationDescriptor``. Every type is checked here; the first
   unsupported one aborts with ``UnsupportedTypeError`` and nothing has been
   sent to the engine yet.
2. ``ModuleRegistrar.register`` translates the descriptor into engine calls
   and returns the module id.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field

from modrun.client.client import Client
from modrun.client.objects import TypeDef, TypeDefKind
from modrun.client.query import Json
from modrun.core.errors import UnsupportedTypeError
from modrun.framework.logging import get_logger
from modrun.framework.schema import ModuleArgument, ModuleFunction, ModuleObject
from modrun.framework.types import Type

log = get_logger(__name__)

_SCALAR_KINDS = (
    TypeDefKind.BOOLEAN_KIND,
    TypeDefKind.INTEGER_KIND,
    TypeDefKind.STRING_KIND,
    TypeDefKind.VOID_KIND,
)


@dataclass(frozen=True)
class TypeSpec:
    """Wire form of a type: a kind, plus the object name for object kinds."""

    kind: TypeDefKind
    object_name: str | None = None

    def to_dict(self) -> dict[str, str]:
        result = {"kind": self.kind.value}
        if self.object_name is not None:
            result["object"] = self.object_name
        return result


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    type: TypeSpec
    description: str | None = None
    default_value: Json | None = None


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    return_type: TypeSpec
    description: str | None = None
    arguments: tuple[ArgumentDescriptor, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ObjectDescriptor:
    name: str
    functions: tuple[FunctionDescriptor, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RegistrationDescriptor:
    """Everything the engine needs to know about the module."""

    objects: tuple[ObjectDescriptor, ...] = field(default_factory=tuple)

    @property
    def function_count(self) -> int:
        return sum(len(obj.functions) for obj in self.objects)

    def to_dict(self) -> dict:
        """Plain-data rendering, used by ``modrun schema``."""
        return {
            "objects": [
                {
                    "name": obj.name,
                    "functions": [
                        {
                            "name": fn.name,
                            "description": fn.description,
                            "returns": fn.return_type.to_dict(),
                            "arguments": [
                                {
                                    "name": arg.name,
                                    "type": arg.type.to_dict(),
                                    "description": arg.description,
                                    "default": arg.default_value.decode() if arg.default_value else None,
                                }
                                for arg in fn.arguments
                            ],
                        }
                        for fn in obj.functions
                    ],
                }
                for obj in self.objects
            ]
        }


def type_spec(type: Type) -> TypeSpec:
    """Check a type descriptor against what the engine can represent."""
    if type.kind in _SCALAR_KINDS:
        return TypeSpec(type.kind)
    if type.kind is TypeDefKind.LIST_KIND:
        raise UnsupportedTypeError("Currently cannot handle lists", type_name=type.name)
    if type.kind is TypeDefKind.INTERFACE_KIND:
        raise UnsupportedTypeError(f"Currently cannot handle custom interfaces: {type.name}", type_name=type.name)
    if type.kind is TypeDefKind.OBJECT_KIND:
        if type.is_idable:
            return TypeSpec(TypeDefKind.OBJECT_KIND, type.short_name)
        raise UnsupportedTypeError(f"Currently cannot handle custom classes: {type.name}", type_name=type.name)
    raise UnsupportedTypeError(f"No support exists for {type.name}", type_name=type.name)


def _default_value(arg: ModuleArgument) -> Json | None:
    if not arg.has_default:
        return None
    try:
        return Json(json.dumps(arg.default))
    except TypeError as e:
        raise UnsupportedTypeError(
            f"Default of argument '{arg.name}' is not JSON serializable: {arg.default!r}",
            type_name=arg.type.name,
            cause=e,
        ).with_context(argument=arg.name) from e


def _describe_function(obj: ModuleObject, fn: ModuleFunction) -> FunctionDescriptor:
    arguments = []
    for arg in fn.arguments:
        try:
            spec = type_spec(arg.type)
        except UnsupportedTypeError as e:
            raise e.with_context(object_name=obj.name, function_name=fn.name, argument=arg.name)
        arguments.append(
            ArgumentDescriptor(
                name=arg.name,
                type=spec,
                description=arg.description,
                default_value=_default_value(arg),
            )
        )

    try:
        return_spec = type_spec(fn.return_type)
    except UnsupportedTypeError as e:
        raise e.with_context(object_name=obj.name, function_name=fn.name)

    return FunctionDescriptor(
        name=fn.name,
        return_type=return_spec,
        description=fn.description,
        arguments=tuple(arguments),
    )


def build_registration(objects: Iterable[ModuleObject]) -> RegistrationDescriptor:
    """Build the descriptor for ``objects``; all-or-nothing."""
    descriptors = tuple(
        ObjectDescriptor(
            name=obj.name,
            functions=tuple(_describe_function(obj, fn) for fn in obj.functions),
        )
        for obj in objects
    )
    return RegistrationDescriptor(objects=descriptors)


class ModuleRegistrar:
    """Sends a ``RegistrationDescriptor`` to the engine."""

    def __init__(self, client: Client):
        self.client = client

    def type_def(self, spec: TypeSpec) -> TypeDef:
        type_def = self.client.type_def()
        if spec.kind is TypeDefKind.OBJECT_KIND:
            return type_def.with_object(spec.object_name)
        return type_def.with_kind(spec.kind)

    def register(self, descriptor: RegistrationDescriptor) -> str:
        """Declare every object and return the module id."""
        module = self.client.module()

        for obj in descriptor.objects:
            object_def = self.client.type_def().with_object(obj.name)

            for fn in obj.functions:
                func = self.client.function(fn.name, self.type_def(fn.return_type))
                if fn.description is not None:
                    func = func.with_description(fn.description)
                for arg in fn.arguments:
                    func = func.with_arg(arg.name, self.type_def(arg.type), arg.description, arg.default_value)
                object_def = object_def.with_function(func)

            module = module.with_object(object_def)
            log.debug("registration.object", object_name=obj.name, functions=len(obj.functions))

        return module.id()
