"""Type descriptors built from Python annotations.

Manifesto:
    A descriptor is a fact about an annotation, not a judgement. Building
    one never fails; whether the engine can represent it is decided where the
    descriptor is used (registration, decoding), so the failure points at
    the function being declared or called.

Tags:
    modrun, framework, types, annotations

Doc-Types:
    api-reference
"""

from __future__ import annotations

import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any

from modrun.client.objects import IdAble, TypeDefKind

_LIST_ORIGINS = (list, tuple, set, frozenset, collections.abc.Sequence)


def unwrap_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``."""
    if typing.get_origin(annotation) is Annotated:
        inner, *meta = typing.get_args(annotation)
        return inner, tuple(meta)
    return annotation, ()


def _qualified_name(annotation: Any) -> str:
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is inspect.Parameter.empty:
        return "<missing annotation>"
    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return repr(annotation).replace("typing.", "")


def _is_interface(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False)) or inspect.isabstract(cls)


def _kind_of(annotation: Any) -> TypeDefKind | None:
    if annotation is inspect.Parameter.empty:
        return None
    if annotation is None or annotation is type(None):
        return TypeDefKind.VOID_KIND

    origin = typing.get_origin(annotation)
    if origin in _LIST_ORIGINS or annotation in _LIST_ORIGINS:
        return TypeDefKind.LIST_KIND
    if origin is not None or isinstance(annotation, types.UnionType):
        return None
    if not isinstance(annotation, type):
        return None

    # bool first: bool is an int subclass
    if annotation is bool:
        return TypeDefKind.BOOLEAN_KIND
    if annotation is int:
        return TypeDefKind.INTEGER_KIND
    if annotation is str:
        return TypeDefKind.STRING_KIND
    if annotation.__module__ == "builtins":
        return None
    if _is_interface(annotation):
        return TypeDefKind.INTERFACE_KIND
    return TypeDefKind.OBJECT_KIND


@dataclass(frozen=True)
class Type:
    """
    Descriptor of one parameter or return annotation.

    ``kind`` is None when the engine has no matching kind (floats, unions,
    dicts, missing annotations).
    """

    name: str
    kind: TypeDefKind | None
    annotation: Any = None

    @classmethod
    def from_annotation(cls, annotation: Any) -> Type:
        annotation, _ = unwrap_annotated(annotation)
        return cls(name=_qualified_name(annotation), kind=_kind_of(annotation), annotation=annotation)

    @property
    def short_name(self) -> str:
        if isinstance(self.annotation, type):
            return self.annotation.__name__
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_idable(self) -> bool:
        return (
            self.kind is TypeDefKind.OBJECT_KIND
            and isinstance(self.annotation, type)
            and issubclass(self.annotation, IdAble)
        )

    def __str__(self) -> str:
        return self.name
