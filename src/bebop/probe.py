"""Explicit outcome type for best-effort filesystem and process probes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Probe(Generic[T]):
    """Either a detected value or the default used because detection failed."""

    value: T
    ok: bool = True
    reason: str = ""

    @classmethod
    def found(cls, value: T) -> Probe[T]:
        return cls(value=value)

    @classmethod
    def missing(cls, default: T, reason: str = "") -> Probe[T]:
        return cls(value=default, ok=False, reason=reason)
