"""
History Log — Append-only, per-part event sequences.

Entries are addressed by the composite key ``(part_id, index)``.
For every part the indices are contiguous starting at 1: ``append``
is the only writer and always uses ``count + 1``, so no caller can
create a gap, overwrite an entry, or reorder the log.
"""

from __future__ import annotations

from typing import Iterator

from .states import HistoryEvent, PartID

HistoryKey = tuple[PartID, int]


class HistoryLog:
    """Per-part event log with a monotonic index."""

    def __init__(self) -> None:
        self._events: dict[HistoryKey, HistoryEvent] = {}
        self._counts: dict[PartID, int] = {}

    def append(self, part_id: PartID, event: HistoryEvent) -> int:
        """Append an event and return its index (1-based)."""
        index = self._counts.get(part_id, 0) + 1
        key = (part_id, index)
        if key in self._events:
            # Only reachable if the counters were tampered with.
            raise RuntimeError(f"History slot {key} already occupied")
        self._events[key] = event
        self._counts[part_id] = index
        return index

    def get(self, part_id: PartID, index: int) -> HistoryEvent | None:
        return self._events.get((part_id, index))

    def count(self, part_id: PartID) -> int:
        """Number of events recorded for a part; 0 for unknown parts."""
        return self._counts.get(part_id, 0)

    def events(self, part_id: PartID) -> list[HistoryEvent]:
        """All events for a part in index order."""
        return [self._events[(part_id, i)] for i in range(1, self.count(part_id) + 1)]

    def parts(self) -> Iterator[PartID]:
        return iter(sorted(self._counts))

    def __len__(self) -> int:
        return len(self._events)

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            str(part_id): [e.to_dict() for e in self.events(part_id)]
            for part_id in self.parts()
        }
