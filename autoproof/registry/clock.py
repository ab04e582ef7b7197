"""Logical clock used to timestamp registrations and history events."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that reports the current logical time."""

    def now(self) -> int:
        ...


class LogicalClock:
    """
    Host-driven monotonic clock (think block height).

    The registry only reads it. The host advances it between calls.

    Example:
        clock = LogicalClock(start=1000)
        registry = PartRegistry(clock=clock)
        clock.advance()
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"Clock cannot start below 0, got {start}")
        self._value = start
        self._lock = threading.Lock()

    def now(self) -> int:
        return self._value

    def advance(self, ticks: int = 1) -> int:
        if ticks < 0:
            raise ValueError(f"Clock cannot move backwards ({ticks} ticks)")
        with self._lock:
            self._value += ticks
            return self._value

    def set(self, value: int) -> int:
        with self._lock:
            if value < self._value:
                raise ValueError(
                    f"Clock cannot move backwards: {self._value} -> {value}"
                )
            self._value = value
            return self._value
