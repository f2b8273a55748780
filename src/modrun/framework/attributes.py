"""Declarations for module code.

    from typing import Annotated

    from modrun import Argument, Container, Directory, function, module_object

    @module_object
    class Ci:
        @function("Search a directory for lines matching a pattern")
        def grep_dir(
            self,
            directory: Annotated[Directory, Argument("The directory to search")],
            pattern: Annotated[str, Argument("The pattern to search for")],
        ) -> str:
            return (
                self.client.container()
                .from_("alpine:latest")
                .with_mounted_directory("/mnt", directory)
                .with_workdir("/mnt")
                .with_exec(["grep", "-R", pattern, "."])
                .stdout()
            )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from modrun.framework.registry import register_object
from modrun.framework.schema import FUNCTION_ATTR, Argument, FunctionMeta

C = TypeVar("C", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

__all__ = ["Argument", "function", "module_object"]


@overload
def module_object(cls: C, /) -> C: ...


@overload
def module_object(*, name: str | None = None) -> Callable[[C], C]: ...


def module_object(cls: C | None = None, /, *, name: str | None = None) -> Any:
    """Register a class as a module object, optionally under an explicit name."""

    def decorator(klass: C) -> C:
        return register_object(klass, name=name)

    if cls is not None:
        return decorator(cls)
    return decorator


@overload
def function(fn: F, /) -> F: ...


@overload
def function(description: str | None = None, /) -> Callable[[F], F]: ...


def function(arg: Any = None, /) -> Any:
    """Expose a method as a module function."""
    if callable(arg):
        setattr(arg, FUNCTION_ATTR, FunctionMeta())
        return arg

    def decorator(fn: F) -> F:
        setattr(fn, FUNCTION_ATTR, FunctionMeta(description=arg))
        return fn

    return decorator

