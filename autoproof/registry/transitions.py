"""
Registry Transitions — Requests and decisions.

Every public operation is described by a RegistryAction and answered
with a RegistryResult. A result is either accepted (carries ``value``)
or rejected (carries ``error`` plus the typed exception that produced
it). Rejections are values, not faults: the registry never lets a
RegistryError escape an operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import ErrorCode, RegistryError

T = TypeVar("T")


class RegistryAction(Enum):
    """Mutating operations the registry mediates."""
    # Access control
    SET_PAUSED = "set_paused"
    TRANSFER_ADMIN = "transfer_admin"

    # Part lifecycle
    REGISTER = "register"
    TRANSFER = "transfer"
    UPDATE_STATUS = "update_status"
    BURN = "burn"


class DecisionKind(Enum):
    """Registry decision outcomes."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class RegistryResult(Generic[T]):
    """
    Outcome of a registry operation.

    Mirrors the ``{value}`` / ``{error}`` response shape callers expect:

        result = registry.transfer_part(alice, 1, bob)
        if result.ok:
            ...
        elif result.error == ErrorCode.PAUSED:
            ...
    """
    kind: DecisionKind
    value: T | None = None
    error: ErrorCode | None = None
    exception: RegistryError | None = field(default=None, repr=False, compare=False)

    @classmethod
    def accepted(cls, value: T) -> RegistryResult[T]:
        return cls(kind=DecisionKind.ACCEPTED, value=value)

    @classmethod
    def rejected(cls, exc: RegistryError) -> RegistryResult[T]:
        return cls(kind=DecisionKind.REJECTED, error=exc.code, exception=exc)

    @property
    def ok(self) -> bool:
        """Convenience property for checking if the operation succeeded."""
        return self.kind == DecisionKind.ACCEPTED

    @property
    def denied(self) -> bool:
        return self.kind == DecisionKind.REJECTED

    @property
    def reason(self) -> str:
        """Human-readable reason for the decision."""
        if self.ok:
            return "accepted"
        if self.exception is not None:
            return self.exception.message
        return f"rejected with error {int(self.error)}"

    def unwrap(self) -> T:
        """Return the value, or raise the RegistryError that rejected the call."""
        if self.ok:
            return self.value
        raise self.exception

    def to_dict(self) -> dict[str, Any]:
        """Render as ``{"value": ...}`` or ``{"error": <code>}``."""
        if not self.ok:
            return {"error": int(self.error)}
        value = self.value
        if hasattr(value, "to_dict"):
            value = value.to_dict()
        return {"value": value}
