"""Multi-domain timestamps.

A trace entry may be stamped in up to three clock domains: monotonic elapsed
time, monotonic system uptime and wall-clock (unix) time.  Parsers fill in
whatever the source format provides and leave the rest at zero, which means
"absent".

Two timestamps compare on the first domain present on **both** sides, in the
order elapsed, system uptime, unix.  When they share no domain the comparison
falls back to the raw ``(elapsed, system_uptime, unix)`` tuple so ordering is
always defined.  Because equality depends on which domains are shared, it is
not transitive across mixed-availability values and timestamps are therefore
not hashable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

_INT64_MAX = 2**63 - 1


@dataclass(slots=True, frozen=True, eq=False)
class Timestamp:
    elapsed_nanos: int = 0
    system_uptime_nanos: int = 0
    unix_nanos: int = 0

    MIN: ClassVar[Timestamp]
    MAX: ClassVar[Timestamp]

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        for name in ("elapsed_nanos", "system_uptime_nanos", "unix_nanos"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"Timestamp.{name} must be an int, got {value!r}")
            if value < 0:
                raise ValueError(f"Timestamp.{name} must be non-negative, got {value}")

    @classmethod
    def from_nanos(
        cls,
        *,
        elapsed_nanos: int = 0,
        system_uptime_nanos: int = 0,
        unix_nanos: int = 0,
    ) -> Timestamp:
        return cls(
            elapsed_nanos=elapsed_nanos,
            system_uptime_nanos=system_uptime_nanos,
            unix_nanos=unix_nanos,
        )

    @property
    def is_empty(self) -> bool:
        return self.elapsed_nanos == 0 and self.system_uptime_nanos == 0 and self.unix_nanos == 0

    def _compare(self, other: Timestamp) -> int:
        pairs = (
            (self.elapsed_nanos, other.elapsed_nanos),
            (self.system_uptime_nanos, other.system_uptime_nanos),
            (self.unix_nanos, other.unix_nanos),
        )
        for mine, theirs in pairs:
            if mine != 0 and theirs != 0:
                return (mine > theirs) - (mine < theirs)
        mine_raw = (self.elapsed_nanos, self.system_uptime_nanos, self.unix_nanos)
        theirs_raw = (other.elapsed_nanos, other.system_uptime_nanos, other.unix_nanos)
        return (mine_raw > theirs_raw) - (mine_raw < theirs_raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: Timestamp) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: Timestamp) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: Timestamp) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: Timestamp) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._compare(other) >= 0

    def __str__(self) -> str:
        parts = []
        if self.elapsed_nanos:
            parts.append(f"elapsed={self.elapsed_nanos}ns")
        if self.system_uptime_nanos:
            parts.append(f"uptime={self.system_uptime_nanos}ns")
        if self.unix_nanos:
            parts.append(f"unix={self.unix_nanos}ns")
        return " ".join(parts) if parts else "<empty>"

    def to_dict(self) -> dict[str, int]:
        payload: dict[str, int] = {}
        if self.elapsed_nanos:
            payload["elapsed_nanos"] = self.elapsed_nanos
        if self.system_uptime_nanos:
            payload["system_uptime_nanos"] = self.system_uptime_nanos
        if self.unix_nanos:
            payload["unix_nanos"] = self.unix_nanos
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Timestamp:
        return cls(
            elapsed_nanos=int(data.get("elapsed_nanos", 0)),
            system_uptime_nanos=int(data.get("system_uptime_nanos", 0)),
            unix_nanos=int(data.get("unix_nanos", 0)),
        )


Timestamp.MIN = Timestamp()
Timestamp.MAX = Timestamp(_INT64_MAX, _INT64_MAX, _INT64_MAX)


__all__ = ["Timestamp"]
