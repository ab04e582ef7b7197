"""
Part State Models — What the registry stores per part.

Mapping to the lifecycle store:
    metadata   -> PartMetadata (one per allocated id, never deleted)
    ownership  -> Identity (separate map, used for authorization checks)
    tokens     -> existence marker (removed on burn)
    history    -> HistoryEvent keyed by (part_id, index)

All records are frozen. The registry replaces them on every
transition instead of mutating in place, so a value handed out by
a query can never change underneath the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from autoproof.config import DEFAULT_NULL_IDENTITY


# Type aliases
Identity = str
PartID = int

# Reserved identity that can never own a part or become admin.
NULL_IDENTITY: Identity = DEFAULT_NULL_IDENTITY


class PartStatus(str, Enum):
    """
    Well-known part statuses.

    Status is free text (admins may set any value); these are the
    values the registry itself assigns or reacts to.
    """
    ACTIVE = "active"
    INSTALLED = "installed"
    RECYCLED = "recycled"


class EventKind(str, Enum):
    """History event tags."""
    REGISTERED = "registered"
    TRANSFERRED = "transferred"
    STATUS_UPDATED = "status-updated"
    BURNED = "burned"


def status_event_tag(new_status: str) -> str:
    """Tag recorded for a status update, e.g. ``status-updated-installed``."""
    return f"{EventKind.STATUS_UPDATED.value}-{new_status}"


@dataclass(frozen=True)
class PartMetadata:
    """
    Descriptive record for a registered part.

    ``status`` is a plain string rather than PartStatus so that
    caller-defined statuses survive untouched.
    """
    serial_number: str
    manufacturer: Identity
    production_date: int
    material_spec: str
    status: str
    last_owner: Identity
    origin_factory: str

    @property
    def recycled(self) -> bool:
        return self.status == PartStatus.RECYCLED.value

    def with_status(self, status: str) -> PartMetadata:
        return replace(self, status=status)

    def with_owner(self, owner: Identity) -> PartMetadata:
        return replace(self, last_owner=owner)

    def to_dict(self) -> dict[str, Any]:
        return {
            "serialNumber": self.serial_number,
            "manufacturer": self.manufacturer,
            "productionDate": self.production_date,
            "materialSpec": self.material_spec,
            "status": self.status,
            "lastOwner": self.last_owner,
            "originFactory": self.origin_factory,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PartMetadata:
        return cls(
            serial_number=data["serialNumber"],
            manufacturer=data["manufacturer"],
            production_date=data["productionDate"],
            material_spec=data["materialSpec"],
            status=data["status"],
            last_owner=data["lastOwner"],
            origin_factory=data["originFactory"],
        )


@dataclass(frozen=True)
class HistoryEvent:
    """One entry of a part's history log."""
    event: str
    timestamp: int
    actor: Identity

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "timestamp": self.timestamp,
            "actor": self.actor,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEvent:
        return cls(
            event=data["event"],
            timestamp=data["timestamp"],
            actor=data["actor"],
        )
