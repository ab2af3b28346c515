"""Tagged outcome of one signal loader.

A loader either returns `Ok(data)` (possibly empty, possibly missing some ids)
or `Degraded(...)` when its whole source is unavailable for the batch. The two
must never be conflated: an empty `Ok` says "no rows", `Degraded` says "no
source".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


class DegradedReason:
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    DISABLED = "disabled"
    BATCH_TOO_LARGE = "batch_too_large"


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: dict[str, T] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return False

    def get(self, supplier_id: str) -> T | None:
        return self.data.get(supplier_id)


@dataclass(frozen=True)
class Degraded:
    source: str
    reason: str = DegradedReason.UNAVAILABLE

    @property
    def degraded(self) -> bool:
        return True

    def get(self, supplier_id: str) -> None:
        return None


SignalResult = Ok[T] | Degraded
