"""Decoding of wire argument values."""

from __future__ import annotations

import json
from typing import Any

from modrun.client.client import Client
from modrun.client.objects import TypeDefKind
from modrun.core.errors import DecodeError, UnsupportedTypeError
from modrun.framework.types import Type

_SCALARS: dict[TypeDefKind, type] = {
    TypeDefKind.BOOLEAN_KIND: bool,
    TypeDefKind.INTEGER_KIND: int,
    TypeDefKind.STRING_KIND: str,
}


class ValueDecoder:
    """
    Converts the JSON text of an argument into the declared Python type.

    Scalars are checked, not coerced: ``"5"`` decodes to ``5`` for an ``int``
    parameter, ``"\\"5\\""`` does not. Identity-bearing objects arrive as
    their id and are rehydrated through the client.
    """

    def __init__(self, client: Client):
        self.client = client

    def __call__(self, value: str, type: Type) -> Any:
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Argument value is not valid JSON: {e}", value=value, cause=e) from e

        if type.kind is TypeDefKind.VOID_KIND:
            return None

        expected = _SCALARS.get(type.kind)
        if expected is not None:
            # bool is an int subclass, reject it explicitly for integers
            if not isinstance(decoded, expected) or (expected is int and isinstance(decoded, bool)):
                raise DecodeError(
                    f"Expected {expected.__name__} for {type.name}, got {_json_type(decoded)}",
                    value=value,
                )
            return decoded

        if type.kind is TypeDefKind.OBJECT_KIND and type.is_idable:
            if not isinstance(decoded, str):
                raise DecodeError(f"Expected an id for {type.short_name}, got {_json_type(decoded)}", value=value)
            return self.client.load_object_from_id(type.annotation, decoded)

        raise UnsupportedTypeError(f"Cannot decode arguments of type {type.name}", type_name=type.name)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__
