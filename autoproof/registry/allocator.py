"""Identifier Allocator — gap-free, never-reused part ids."""

from __future__ import annotations

from .states import PartID


class IdentifierAllocator:
    """
    Monotonic id counter with a two-step allocate.

    ``peek()`` computes the next id without side effects; ``commit()``
    advances the counter once the registration using that id has
    passed every check. A registration that is rejected in between
    therefore leaves no gap.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"Counter cannot start below 0, got {start}")
        self._current = start

    @property
    def current(self) -> int:
        """Last committed id (0 when nothing has been allocated)."""
        return self._current

    def peek(self) -> PartID:
        return self._current + 1

    def commit(self, part_id: PartID) -> PartID:
        if part_id != self._current + 1:
            raise ValueError(
                f"Out-of-order commit: expected {self._current + 1}, got {part_id}"
            )
        self._current = part_id
        return part_id
