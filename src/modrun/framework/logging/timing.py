"""
Timed steps of an invocation.

    with log_step("registration.submit") as step:
        module_id = registrar.register(descriptor)
        step.add_metric("module_id", module_id)

A step pushes its span id into the log context, so events logged inside it
carry ``step`` and ``span_id``, and a nested step records its parent span.
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from modrun.framework.logging.context import get_context, get_logger, push_context

log = get_logger("modrun.timing")


def new_span_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class StepTimer:
    """Duration, metrics and outcome of one step."""

    step: str
    span_id: str = field(default_factory=new_span_id)
    parent_span_id: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = None
    _started: float = field(default_factory=time.perf_counter, repr=False)
    _finished: float | None = field(default=None, repr=False)

    def add_metric(self, key: str, value: Any) -> "StepTimer":
        self.metrics[key] = value
        return self

    def finish(self) -> "StepTimer":
        if self._finished is None:
            self._finished = time.perf_counter()
        return self

    @property
    def finished(self) -> bool:
        return self._finished is not None

    @property
    def duration_ms(self) -> float:
        end = self._finished if self._finished is not None else time.perf_counter()
        return (end - self._started) * 1000

    def fields(self) -> dict[str, Any]:
        """Event fields: span ids, duration, error (if any), then metrics."""
        out: dict[str, Any] = {"span_id": self.span_id, "duration_ms": round(self.duration_ms, 2)}
        if self.parent_span_id:
            out["parent_span_id"] = self.parent_span_id
        if self.error is not None:
            out["error_type"] = type(self.error).__name__
            out["error_message"] = str(self.error)
        out.update(self.metrics)
        return out


@contextmanager
def log_step(event: str, level: str = "info", **metrics: Any) -> Iterator[StepTimer]:
    """
    Time a step and log it.

    ``<event>.start`` is logged at debug. On success ``<event>.end`` is
    logged at ``level``; on failure ``<event>.error`` is logged with the
    error type and message and the exception propagates. The traceback is
    left to whoever reports the failure.
    """
    parent = get_context().span_id
    timer = StepTimer(event, parent_span_id=parent, metrics=dict(metrics))
    token = push_context(span_id=timer.span_id, parent_span_id=parent, step=event)
    log.debug(f"{event}.start", **timer.fields())

    try:
        yield timer
    except Exception as e:
        timer.error = e
        log.error(f"{event}.error", **timer.finish().fields())
        raise
    finally:
        timer.finish()
        token.restore()

    getattr(log, level)(f"{event}.end", **timer.fields())
