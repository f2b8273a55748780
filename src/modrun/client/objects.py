"""
Engine object types used by the entry point and by module code.

Only the surface the entry point needs (module, type definitions, functions,
the current function call) and the common identity-bearing objects a
module method passes around (container, directory, file, service, terminal)
live here. Every object is a lazy query path; nothing is sent to the engine
until a scalar is requested.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from modrun.client.query import Json, QueryChain

if TYPE_CHECKING:
    from modrun.client.client import Client


class TypeDefKind(str, Enum):
    """Kinds of type definitions the engine understands."""

    BOOLEAN_KIND = "BOOLEAN_KIND"
    INTEGER_KIND = "INTEGER_KIND"
    STRING_KIND = "STRING_KIND"
    VOID_KIND = "VOID_KIND"
    LIST_KIND = "LIST_KIND"
    INTERFACE_KIND = "INTERFACE_KIND"
    OBJECT_KIND = "OBJECT_KIND"


class AbstractObject:
    """Base for all engine objects: a client plus a query path."""

    def __init__(self, client: Client, chain: QueryChain):
        self._client = client
        self._chain = chain

    def _select(self, cls: type[AbstractObject], field: str, **args: Any) -> Any:
        return cls(self._client, self._chain.select(field, **args))

    def _query_leaf(self, field: str, **args: Any) -> Any:
        return self._client.execute(self._chain.select(field, **args))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({'.'.join(self._chain.path)})"


class IdAble(AbstractObject):
    """An object with an engine identity handle."""

    def id(self) -> str:
        """A unique identifier for this object."""
        return str(self._query_leaf("id"))

    def __query_literal__(self) -> str:
        # Objects passed as arguments travel by id
        return json.dumps(self.id(), ensure_ascii=False)


# ── Module declaration ───────────────────────────────────────────────────


class Function(IdAble):
    """Function definition of a module object."""

    def with_description(self, description: str) -> Function:
        return self._select(Function, "withDescription", description=description)

    def with_arg(
        self,
        name: str,
        type_def: TypeDef,
        description: str | None = None,
        default_value: Json | None = None,
    ) -> Function:
        return self._select(
            Function,
            "withArg",
            name=name,
            typeDef=type_def,
            description=description,
            defaultValue=default_value,
        )


class TypeDef(IdAble):
    """Type definition sent to the engine during registration."""

    def with_kind(self, kind: TypeDefKind) -> TypeDef:
        return self._select(TypeDef, "withKind", kind=kind)

    def with_object(self, name: str, description: str | None = None) -> TypeDef:
        return self._select(TypeDef, "withObject", name=name, description=description)

    def with_function(self, function: Function) -> TypeDef:
        return self._select(TypeDef, "withFunction", function=function)


class Module(IdAble):
    """The module being declared."""

    def with_object(self, object: TypeDef) -> Module:
        return self._select(Module, "withObject", object=object)


@dataclass(frozen=True)
class FunctionCallArgValue:
    """One argument of the current function call; ``value`` is JSON text."""

    name: str
    value: str


class FunctionCall(AbstractObject):
    """The function call this process was started for."""

    def parent_name(self) -> str:
        return self._query_leaf("parentName") or ""

    def name(self) -> str:
        return self._query_leaf("name") or ""

    def input_args(self) -> list[FunctionCallArgValue]:
        rows = self._client.execute(self._chain.select("inputArgs"), subfields=("name", "value")) or []
        return [FunctionCallArgValue(name=row["name"], value=row["value"]) for row in rows]

    def return_value(self, value: Json) -> None:
        self._query_leaf("returnValue", value=value)


# ── Common objects ───────────────────────────────────────────────────────


class File(IdAble):
    """A file."""

    def contents(self) -> str:
        return self._query_leaf("contents")

    def name(self) -> str:
        return self._query_leaf("name")

    def size(self) -> int:
        return int(self._query_leaf("size"))


class Directory(IdAble):
    """A directory."""

    def directory(self, path: str) -> Directory:
        return self._select(Directory, "directory", path=path)

    def entries(self, path: str | None = None) -> list[str]:
        return list(self._query_leaf("entries", path=path) or [])

    def file(self, path: str) -> File:
        return self._select(File, "file", path=path)

    def with_new_file(self, path: str, contents: str) -> Directory:
        return self._select(Directory, "withNewFile", path=path, contents=contents)


class Service(IdAble):
    """A content-addressed service providing TCP connectivity."""

    def endpoint(self, port: int | None = None, scheme: str | None = None) -> str:
        return self._query_leaf("endpoint", port=port, scheme=scheme)


class Terminal(IdAble):
    """An interactive terminal session."""


class Container(IdAble):
    """An OCI-compatible container."""

    def from_(self, address: str) -> Container:
        return self._select(Container, "from", address=address)

    def with_exec(self, args: Sequence[str]) -> Container:
        return self._select(Container, "withExec", args=list(args))

    def with_workdir(self, path: str) -> Container:
        return self._select(Container, "withWorkdir", path=path)

    def with_env_variable(self, name: str, value: str) -> Container:
        return self._select(Container, "withEnvVariable", name=name, value=value)

    def with_mounted_directory(self, path: str, source: Directory) -> Container:
        return self._select(Container, "withMountedDirectory", path=path, source=source)

    def with_service_binding(self, alias: str, service: Service) -> Container:
        return self._select(Container, "withServiceBinding", alias=alias, service=service)

    def with_exposed_port(self, port: int) -> Container:
        return self._select(Container, "withExposedPort", port=port)

    def as_service(self) -> Service:
        return self._select(Service, "asService")

    def terminal(self) -> Terminal:
        return self._select(Terminal, "terminal")

    def directory(self, path: str) -> Directory:
        return self._select(Directory, "directory", path=path)

    def file(self, path: str) -> File:
        return self._select(File, "file", path=path)

    def stdout(self) -> str:
        return self._query_leaf("stdout")

    def stderr(self) -> str:
        return self._query_leaf("stderr")
