"""Call results.

A function either returns an engine object, which travels back as its id,
or a plain value, which travels back as itself.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from modrun.client.objects import IdAble
from modrun.client.query import Json


@dataclass(frozen=True)
class IdentityResult:
    """The result exposed an identity handle; ``id`` is its string form."""

    id: str

    def encode(self) -> Json:
        return Json(json.dumps(self.id))


@dataclass(frozen=True)
class RawResult:
    value: Any

    def encode(self) -> Json:
        return Json(json.dumps(self.value))


CallResult = IdentityResult | RawResult


def to_result(value: Any) -> CallResult:
    """Classify a function's return value."""
    if isinstance(value, IdAble):
        return IdentityResult(str(value.id()))
    return RawResult(value)
