"""
Lazy query chains.

A client object is nothing but a path of field selections from the query
root. Methods that return another object extend the path; methods that
return a scalar render the path into a GraphQL query and execute it.

    container { from(address: "alpine") { withExec(args: ["echo", "hi"]) { stdout } } }

is the rendering of the chain

    [container, from(address="alpine"), withExec(args=["echo", "hi"]), stdout]

Tags:
    modrun, client, graphql, query-builder

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Json:
    """
    Value of the engine's ``JSON`` scalar.

    Holds already-encoded JSON text; it is sent as a GraphQL string.
    """

    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

    @classmethod
    def encode(cls, value: Any) -> Json:
        return cls(json.dumps(value))

    def decode(self) -> Any:
        return json.loads(self.text)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Json) and other.text == self.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Json({self.text!r})"


def format_value(value: Any) -> str:
    """Render a Python value as a GraphQL argument literal."""
    if hasattr(value, "__query_literal__"):
        return value.__query_literal__()
    if isinstance(value, Json):
        return json.dumps(value.text, ensure_ascii=False)
    if isinstance(value, Enum):
        return str(value.value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    raise TypeError(f"Cannot render {type(value).__name__} as a query argument")


@dataclass(frozen=True)
class Selection:
    """One field of a query path, with its arguments in declaration order."""

    field: str
    args: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, field: str, **args: Any) -> Selection:
        # Optional arguments left at None are omitted, not sent as null
        return cls(field, tuple((k, v) for k, v in args.items() if v is not None))

    def render(self) -> str:
        if not self.args:
            return self.field
        rendered = ", ".join(f"{name}: {format_value(value)}" for name, value in self.args)
        return f"{self.field}({rendered})"


@dataclass(frozen=True)
class QueryChain:
    """Immutable path of selections from the query root."""

    selections: tuple[Selection, ...] = field(default_factory=tuple)

    def chain(self, selection: Selection) -> QueryChain:
        return QueryChain(self.selections + (selection,))

    def select(self, field: str, **args: Any) -> QueryChain:
        return self.chain(Selection.of(field, **args))

    @property
    def path(self) -> list[str]:
        return [s.field for s in self.selections]

    def render(self, subfields: tuple[str, ...] = ()) -> str:
        """
        Render as a query document.

        ``subfields`` selects scalar fields of the last selection when it
        returns a list of objects (``inputArgs { name value }``).
        """
        if not self.selections:
            raise ValueError("Cannot render an empty query chain")

        # Argument ids resolve in chain order
        rendered = [s.render() for s in self.selections]
        body = "{ " + " ".join(subfields) + " }" if subfields else ""
        for selection in reversed(rendered):
            body = f"{selection} {body}" if body else selection
            body = "{ " + body + " }"
        return "query " + body

    def extract(self, data: Any) -> Any:
        """Walk response ``data`` along the selection path."""
        for name in self.path:
            if data is None:
                return None
            data = data[name]
        return data

    def __len__(self) -> int:
        return len(self.selections)
