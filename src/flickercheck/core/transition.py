from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from flickercheck.core.constants import TRANSITION_TYPES
from flickercheck.core.errors import TraceValidationError
from flickercheck.core.timestamp import Timestamp


def is_valid_transition_type(value: str) -> bool:
    """Accepts a plain type (``OPEN``) or a composite (``OPEN|TO_FRONT``)."""
    parts = value.split("|")
    return all(part in TRANSITION_TYPES for part in parts) and len(parts) == len(set(parts))


@dataclass(slots=True, frozen=True)
class WindowChange:
    window_name: str
    transit_mode: str

    def __post_init__(self) -> None:
        if self.transit_mode not in TRANSITION_TYPES:
            raise ValueError(f"Unsupported transit mode for {self.window_name!r}: {self.transit_mode!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"window_name": self.window_name, "transit_mode": self.transit_mode}


@dataclass(slots=True, frozen=True)
class Transition:
    id: int
    start: Timestamp
    end: Timestamp
    type: str
    changes: tuple[WindowChange, ...] = ()
    is_incomplete: bool = False

    def __post_init__(self) -> None:
        if not is_valid_transition_type(self.type):
            raise ValueError(f"Unsupported transition type: {self.type!r}")
        if not isinstance(self.changes, tuple):
            object.__setattr__(self, "changes", tuple(self.changes))

    @property
    def timestamp(self) -> Timestamp:
        return self.start

    def __str__(self) -> str:
        state = "incomplete" if self.is_incomplete else "complete"
        return f"Transition#{self.id}({self.type}, {state}, start={self.start}, end={self.end}, changes={len(self.changes)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "changes": [change.to_dict() for change in self.changes],
            "is_incomplete": self.is_incomplete,
        }


class TransitionsTrace:
    """Transitions in the order the recorder emitted them.

    Unlike state traces this sequence is not re-sorted by start time:
    overlapping transitions keep their recorded order.  Ids must be unique so
    results can be grouped per transition.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Transition] = ()) -> None:
        materialized = tuple(entries)
        seen: set[int] = set()
        for index, transition in enumerate(materialized):
            if transition.id in seen:
                raise TraceValidationError(f"Duplicate transition id {transition.id} at entry {index}")
            seen.add(transition.id)
        self._entries: tuple[Transition, ...] = materialized

    @property
    def entries(self) -> tuple[Transition, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Transition]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Transition:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"TransitionsTrace(entries={len(self._entries)})"

    def complete(self) -> list[Transition]:
        return [transition for transition in self._entries if not transition.is_incomplete]

    def incomplete(self) -> list[Transition]:
        return [transition for transition in self._entries if transition.is_incomplete]


__all__ = [
    "Transition",
    "TransitionsTrace",
    "WindowChange",
    "is_valid_transition_type",
]
