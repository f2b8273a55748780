"""Argument binding for call mode.

Binding is one pass over the declared parameters. For each parameter the
supplied arguments are scanned for a matching name; the first match is
decoded and the scan for that parameter stops. Supplied arguments that match
no parameter are dropped. A parameter without a supplied value takes its
declared default, or the binding fails.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from modrun.client.objects import FunctionCallArgValue
from modrun.core.errors import BindingError, DecodeError
from modrun.framework.logging import get_logger
from modrun.framework.schema import ModuleFunction
from modrun.framework.types import Type

log = get_logger(__name__)

Decode = Callable[[str, Type], Any]


def bind_arguments(
    function: ModuleFunction,
    input_args: Sequence[FunctionCallArgValue],
    decode: Decode,
) -> list[Any]:
    """Return positional arguments for ``function`` in declaration order."""
    bound: list[Any] = []
    missing: list[str] = []

    for param in function.arguments:
        for arg in input_args:
            if arg.name == param.name:
                try:
                    bound.append(decode(arg.value, param.type))
                except DecodeError as e:
                    raise e.with_context(function_name=function.name, argument=param.name)
                break
        else:
            if param.has_default:
                bound.append(param.default)
            else:
                missing.append(param.name)

    if missing:
        raise BindingError(
            f"Missing required arguments for '{function.name}': {', '.join(missing)}",
            missing_params=missing,
        ).with_context(function_name=function.name)

    declared = set(function.argument_names)
    dropped = sorted({arg.name for arg in input_args if arg.name not in declared})
    if dropped:
        log.debug("binding.unmatched_arguments", function_name=function.name, dropped=dropped)

    return bound
