"""
Client handle shared by the entry point and module objects.

    client = connect()
    out = client.container().from_("alpine").with_exec(["echo", "hi"]).stdout()
"""

from __future__ import annotations

from typing import Any, TypeVar

from modrun.client.objects import (
    AbstractObject,
    Container,
    Directory,
    Function,
    FunctionCall,
    Module,
    TypeDef,
)
from modrun.client.query import QueryChain
from modrun.client.transport import Transport
from modrun.core.settings import ModrunSettings, get_settings

T = TypeVar("T", bound=AbstractObject)


class Client:
    """Root of every query path."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def execute(self, chain: QueryChain, subfields: tuple[str, ...] = ()) -> Any:
        """Run ``chain`` and return the value at its end."""
        data = self._transport.execute(chain.render(subfields))
        return chain.extract(data)

    def _root(self, cls: type[T], field: str, **args: Any) -> T:
        return cls(self, QueryChain().select(field, **args))

    # ── Constructors ─────────────────────────────────────────────

    def container(self) -> Container:
        return self._root(Container, "container")

    def directory(self) -> Directory:
        return self._root(Directory, "directory")

    def module(self) -> Module:
        return self._root(Module, "module")

    def type_def(self) -> TypeDef:
        return self._root(TypeDef, "typeDef")

    def function(self, name: str, return_type: TypeDef) -> Function:
        return self._root(Function, "function", name=name, returnType=return_type)

    def current_function_call(self) -> FunctionCall:
        return self._root(FunctionCall, "currentFunctionCall")

    def load_object_from_id(self, cls: type[T], id: str) -> T:
        """Rehydrate an object of type ``cls`` from its id (``loadContainerFromID``)."""
        return self._root(cls, f"load{cls.__name__}FromID", id=id)

    # ── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def connect(settings: ModrunSettings | None = None) -> Client:
    """Connect to the engine session described by ``settings``."""
    return Client(Transport.from_settings(settings or get_settings()))
