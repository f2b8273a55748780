"""
Invocation context for log events.

The entry point sets the context once per process (mode, then object and
function in call mode) and timed steps push their span fields on top.
``add_context_processor`` copies whatever is current into every structlog
event, so nothing below the entry point passes these values around.
"""

import uuid
from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass, replace
from typing import Any

import structlog


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every event of one invocation."""

    invocation_id: str | None = None
    mode: str | None = None  # register | call
    object: str | None = None
    function: str | None = None

    span_id: str | None = None
    parent_span_id: str | None = None
    step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **fields: Any) -> "LogContext":
        """Copy with the non-None ``fields`` applied."""
        return replace(self, **{k: v for k, v in fields.items() if v is not None})


_EMPTY = LogContext()
_current: ContextVar[LogContext] = ContextVar("modrun_log_context", default=_EMPTY)


def get_context() -> LogContext:
    return _current.get()


def set_context(**fields: Any) -> LogContext:
    """Replace the context. An ``invocation_id`` is generated unless given."""
    if fields.get("invocation_id") is None:
        fields["invocation_id"] = uuid.uuid4().hex[:12]
    ctx = LogContext(**fields)
    _current.set(ctx)
    return ctx


def bind_context(**fields: Any) -> LogContext:
    """Merge ``fields`` into the current context."""
    ctx = get_context().merge(**fields)
    _current.set(ctx)
    return ctx


def clear_context() -> None:
    _current.set(_EMPTY)


class ContextToken:
    """Restores the context that was current before ``push_context``."""

    def __init__(self, token: Token):
        self._token = token

    def restore(self) -> None:
        _current.reset(self._token)


def push_context(**fields: Any) -> ContextToken:
    """Merge ``fields`` for a scoped operation; call ``restore()`` when done."""
    return ContextToken(_current.set(get_context().merge(**fields)))


def add_context_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: add context fields the event does not set itself."""
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Structured logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)
