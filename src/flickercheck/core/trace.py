from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from flickercheck.core.errors import TraceValidationError
from flickercheck.core.timestamp import Timestamp


class TimestampedEntry(Protocol):
    @property
    def timestamp(self) -> Timestamp: ...


EntryT = TypeVar("EntryT", bound=TimestampedEntry)
TraceT = TypeVar("TraceT", bound="Trace[Any]")


class Trace(Generic[EntryT]):
    """Immutable, time-ordered sequence of snapshots from one subsystem."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[EntryT] = ()) -> None:
        materialized = tuple(entries)
        for index in range(1, len(materialized)):
            previous = materialized[index - 1].timestamp
            current = materialized[index].timestamp
            if current < previous:
                raise TraceValidationError(
                    f"{type(self).__name__} entries must be non-decreasing by timestamp: "
                    f"entry {index} ({current}) precedes entry {index - 1} ({previous})"
                )
        self._entries: tuple[EntryT, ...] = materialized

    @property
    def entries(self) -> tuple[EntryT, ...]:
        return self._entries

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def start_timestamp(self) -> Timestamp | None:
        return self._entries[0].timestamp if self._entries else None

    @property
    def end_timestamp(self) -> Timestamp | None:
        return self._entries[-1].timestamp if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EntryT]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> EntryT:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trace):
            return NotImplemented
        return type(self) is type(other) and self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entries={len(self._entries)}, start={self.start_timestamp}, end={self.end_timestamp})"

    def first(self) -> EntryT:
        if not self._entries:
            raise LookupError(f"{type(self).__name__} is empty")
        return self._entries[0]

    def last(self) -> EntryT:
        if not self._entries:
            raise LookupError(f"{type(self).__name__} is empty")
        return self._entries[-1]

    def filter(self: TraceT, start: Timestamp, end: Timestamp) -> TraceT:
        """Entries with ``start <= timestamp <= end``, in their original order."""
        kept = [entry for entry in self._entries if start <= entry.timestamp <= end]
        return type(self)(kept)

    def entry_at(self, timestamp: Timestamp) -> EntryT:
        """Latest entry stamped at or before ``timestamp``."""
        found: EntryT | None = None
        for entry in self._entries:
            if entry.timestamp > timestamp:
                break
            found = entry
        if found is None:
            raise LookupError(f"No {type(self).__name__} entry at or before {timestamp}")
        return found


@dataclass(slots=True, frozen=True)
class WindowState:
    title: str
    is_visible: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "is_visible": self.is_visible}


@dataclass(slots=True, frozen=True)
class WindowManagerState:
    timestamp: Timestamp
    windows: tuple[WindowState, ...] = ()
    focused_window: str | None = None

    def visible_windows(self) -> list[WindowState]:
        return [window for window in self.windows if window.is_visible]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.to_dict(),
            "windows": [window.to_dict() for window in self.windows],
            "focused_window": self.focused_window,
        }


@dataclass(slots=True, frozen=True)
class Layer:
    name: str
    is_visible: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "is_visible": self.is_visible}


@dataclass(slots=True, frozen=True)
class LayerTraceEntry:
    timestamp: Timestamp
    layers: tuple[Layer, ...] = field(default_factory=tuple)

    def visible_layers(self) -> list[Layer]:
        return [layer for layer in self.layers if layer.is_visible]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.to_dict(),
            "layers": [layer.to_dict() for layer in self.layers],
        }


class WindowManagerTrace(Trace[WindowManagerState]):
    __slots__ = ()


class LayersTrace(Trace[LayerTraceEntry]):
    __slots__ = ()


__all__ = [
    "Layer",
    "LayerTraceEntry",
    "LayersTrace",
    "TimestampedEntry",
    "Trace",
    "WindowManagerState",
    "WindowManagerTrace",
    "WindowState",
]
