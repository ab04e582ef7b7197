"""
Part Registry — Single authority for part lifecycle transitions.

All meaningful state change for a part goes through this registry.

Architecture:
    1. Caller invokes an operation (register, transfer, status, burn, ...)
    2. Access control is checked (admin, pause flag)
    3. Inputs are validated against the current state
    4. The lifecycle store is mutated
    5. Exactly one history event is appended for the part
    6. The decision (allowed or denied) is attested in the journal

Steps 2 and 3 raise before step 4 ever runs, so a rejected call
leaves the registry exactly as it found it.

Key principle:
    > Every state a part has ever been in can be read back from its history.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Generic, TypeVar
from uuid import uuid4

from autoproof.config import RegistryConfig
from autoproof.monitoring.logging import LogLevel, StructuredLogger

from .access import AccessControl
from .allocator import IdentifierAllocator
from .clock import Clock, LogicalClock
from .errors import (
    AlreadyRecycledError,
    AlreadyRegisteredError,
    InvalidMetadataError,
    NotFoundError,
    NotOwnerError,
    PausedError,
    RegistryError,
)
from .history import HistoryLog
from .states import (
    EventKind,
    HistoryEvent,
    Identity,
    PartID,
    PartMetadata,
    PartStatus,
    status_event_tag,
)
from .transitions import RegistryAction, RegistryResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class Applied(Generic[T]):
    """A committed mutation: the value handed back to the caller and the
    event that announces it."""
    value: T
    event: str
    fields: dict[str, Any] = field(default_factory=dict)


# Operation used to re-apply each journaled action during replay.
_REPLAY_METHODS: dict[RegistryAction, str] = {
    RegistryAction.SET_PAUSED: "set_paused",
    RegistryAction.TRANSFER_ADMIN: "transfer_admin",
    RegistryAction.REGISTER: "register_part",
    RegistryAction.TRANSFER: "transfer_part",
    RegistryAction.UPDATE_STATUS: "update_part_status",
    RegistryAction.BURN: "burn_part",
}


@dataclass
class Attestation:
    """
    Record of a registry decision.

    Every mutating call produces an attestation, whether allowed or
    denied. Attestations are never modified once stored.
    """
    id: str
    timestamp: int
    actor: str
    action: str
    target: PartID | None
    decision: str  # "allowed" or "denied"
    error_code: int | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "actor": self.actor,
            "action": self.action,
            "target": self.target,
            "decision": self.decision,
            "error_code": self.error_code,
            "arguments": dict(self.arguments),
            "recorded_at": self.recorded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attestation:
        recorded_at = data.get("recorded_at")
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            actor=data["actor"],
            action=data["action"],
            target=data.get("target"),
            decision=data["decision"],
            error_code=data.get("error_code"),
            arguments=dict(data.get("arguments", {})),
            recorded_at=(
                datetime.fromisoformat(recorded_at)
                if recorded_at
                else datetime.now(timezone.utc)
            ),
        )


class AttestationStore:
    """
    Storage for attestations.

    Attestations are:
    - Immutable once stored
    - Queryable by various criteria
    - Replayable to reconstruct state
    """

    def __init__(self) -> None:
        self._attestations: list[Attestation] = []

    def record(self, attestation: Attestation) -> None:
        self._attestations.append(attestation)

    def query(
        self,
        actor: str | None = None,
        action: str | RegistryAction | None = None,
        target: PartID | None = None,
        decision: str | None = None,
    ) -> list[Attestation]:
        """Query attestations by criteria."""
        if isinstance(action, RegistryAction):
            action = action.value

        results = self._attestations

        if actor is not None:
            results = [a for a in results if a.actor == actor]
        if action is not None:
            results = [a for a in results if a.action == action]
        if target is not None:
            results = [a for a in results if a.target == target]
        if decision is not None:
            results = [a for a in results if a.decision == decision]

        return list(results)

    def all(self) -> list[Attestation]:
        return list(self._attestations)

    def count(self) -> int:
        return len(self._attestations)


class PartRegistry:
    """
    The parts registry — NFT-backed lifecycle and provenance for parts.

    This class:
    1. Allocates gap-free part ids
    2. Enforces admin, owner and pause rules on every transition
    3. Appends one history event per part-level transition
    4. Journals every decision and can replay the journal

    Usage:
        registry = PartRegistry()
        admin = registry.get_admin()

        part_id = registry.register_part(
            admin, "SN123456", "Aluminum-Alloy", "FactoryA"
        ).unwrap()

        result = registry.transfer_part(admin, part_id, "ST2CY5...")
        if not result.ok:
            log.info(f"Denied: {result.reason}")
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        clock: Clock | None = None,
        structured_logger: StructuredLogger | None = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self._clock = clock or LogicalClock()
        self._log = structured_logger or StructuredLogger(
            name="autoproof.registry",
            level=LogLevel.parse(self.config.log_level),
        )

        # Mutations are serialized; queries read under the same lock.
        self._lock = threading.RLock()

        self._access = AccessControl(
            admin=self.config.initial_admin,
            paused=self.config.start_paused,
            null_identity=self.config.null_identity,
        )
        self._allocator = IdentifierAllocator()
        self._metadata: dict[PartID, PartMetadata] = {}
        self._owners: dict[PartID, Identity] = {}
        self._tokens: set[PartID] = set()
        self._history = HistoryLog()
        self._attestation_store = AttestationStore()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def attestation_store(self) -> AttestationStore:
        """Access to the decision journal."""
        return self._attestation_store

    # =========================================================================
    # Access control
    # =========================================================================

    def is_admin(self, caller: Identity) -> bool:
        with self._lock:
            return self._access.is_admin(caller)

    def set_paused(self, caller: Identity, pause: bool) -> RegistryResult[bool]:
        """Halt or resume part transfers. Admin only."""
        def apply() -> Applied[bool]:
            paused = self._access.set_paused(caller, pause)
            return Applied(paused, "pause_changed", {"paused": paused})

        return self._mediate(RegistryAction.SET_PAUSED, caller, None, {"pause": pause}, apply)

    def transfer_admin(self, caller: Identity, new_admin: Identity) -> RegistryResult[bool]:
        """Hand the admin role to another identity. Admin only."""
        def apply() -> Applied[bool]:
            self._access.transfer_admin(caller, new_admin)
            return Applied(True, "admin_transferred", {"new_admin": new_admin})

        return self._mediate(
            RegistryAction.TRANSFER_ADMIN, caller, None, {"new_admin": new_admin}, apply
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def register_part(
        self,
        caller: Identity,
        serial_number: str,
        material_spec: str,
        origin_factory: str,
    ) -> RegistryResult[PartID]:
        """
        Register a new part and mint its token to the caller.

        Args:
            caller: Must be the admin; becomes manufacturer and first owner
            serial_number: Non-empty, at most ``max_serial_length`` chars
            material_spec: Non-empty, at most ``max_material_length`` chars
            origin_factory: Non-empty, at most ``max_origin_length`` chars

        Returns:
            RegistryResult carrying the new part id
        """
        arguments = {
            "serial_number": serial_number,
            "material_spec": material_spec,
            "origin_factory": origin_factory,
        }

        def apply() -> Applied[PartID]:
            self._access.require_admin(caller)
            self._check_text("serial_number", serial_number, self.config.max_serial_length)
            self._check_text("material_spec", material_spec, self.config.max_material_length)
            self._check_text("origin_factory", origin_factory, self.config.max_origin_length)

            part_id = self._allocator.peek()
            if part_id in self._metadata:
                raise AlreadyRegisteredError(part_id)

            now = self._clock.now()
            self._tokens.add(part_id)
            self._owners[part_id] = caller
            self._metadata[part_id] = PartMetadata(
                serial_number=serial_number,
                manufacturer=caller,
                production_date=now,
                material_spec=material_spec,
                status=PartStatus.ACTIVE.value,
                last_owner=caller,
                origin_factory=origin_factory,
            )
            self._history.append(part_id, HistoryEvent(EventKind.REGISTERED.value, now, caller))
            self._allocator.commit(part_id)

            return Applied(
                part_id, "part_registered",
                {"part_id": part_id, "serial_number": serial_number},
            )

        return self._mediate(RegistryAction.REGISTER, caller, None, arguments, apply)

    def transfer_part(
        self,
        caller: Identity,
        part_id: PartID,
        new_owner: Identity,
    ) -> RegistryResult[bool]:
        """
        Move a part to a new owner.

        Only the current owner may transfer; the admin has no override.
        Checked in order: paused, null recipient, existence, ownership,
        recycled.
        """
        def apply() -> Applied[bool]:
            if self._access.paused:
                raise PausedError()
            self._access.require_real_identity(new_owner)
            owner, metadata = self._require_owned_part(part_id)
            if owner != caller:
                raise NotOwnerError(part_id, caller, current_owner=owner)
            self._require_not_recycled(part_id, metadata)

            self._owners[part_id] = new_owner
            self._metadata[part_id] = metadata.with_owner(new_owner)
            self._append(part_id, EventKind.TRANSFERRED.value, caller)

            return Applied(True, "part_transferred", {
                "part_id": part_id, "previous_owner": owner, "new_owner": new_owner,
            })

        return self._mediate(
            RegistryAction.TRANSFER, caller, part_id,
            {"part_id": part_id, "new_owner": new_owner}, apply,
        )

    def update_part_status(
        self,
        caller: Identity,
        part_id: PartID,
        new_status: str,
    ) -> RegistryResult[bool]:
        """
        Overwrite a part's status. Admin only.

        Any status text is accepted; setting ``recycled`` makes the
        part terminal exactly as a burn would, but keeps its token.
        """
        def apply() -> Applied[bool]:
            self._access.require_admin(caller)
            self._check_length("new_status", new_status, self.config.max_status_length)
            metadata = self._metadata.get(part_id)
            if metadata is None:
                raise NotFoundError(part_id)
            self._require_not_recycled(part_id, metadata)

            self._metadata[part_id] = metadata.with_status(new_status)
            self._append(part_id, status_event_tag(new_status), caller)

            return Applied(True, "part_status_updated", {
                "part_id": part_id, "previous_status": metadata.status, "new_status": new_status,
            })

        return self._mediate(
            RegistryAction.UPDATE_STATUS, caller, part_id,
            {"part_id": part_id, "new_status": new_status}, apply,
        )

    def burn_part(self, caller: Identity, part_id: PartID) -> RegistryResult[bool]:
        """
        Retire a part: destroy its token and mark it recycled.

        The caller must be the admin AND the current owner. Metadata,
        ownership and history are kept as the provenance record.
        """
        def apply() -> Applied[bool]:
            self._access.require_admin(caller)
            owner, metadata = self._require_owned_part(part_id)
            if owner != caller:
                raise NotOwnerError(part_id, caller, current_owner=owner)
            self._require_not_recycled(part_id, metadata)

            self._tokens.discard(part_id)
            self._metadata[part_id] = metadata.with_status(PartStatus.RECYCLED.value)
            self._append(part_id, EventKind.BURNED.value, caller)

            return Applied(True, "part_burned", {"part_id": part_id})

        return self._mediate(RegistryAction.BURN, caller, part_id, {"part_id": part_id}, apply)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_part_metadata(self, part_id: PartID) -> RegistryResult[PartMetadata]:
        with self._lock:
            metadata = self._metadata.get(part_id)
        if metadata is None:
            return RegistryResult.rejected(NotFoundError(part_id))
        return RegistryResult.accepted(metadata)

    def get_part_owner(self, part_id: PartID) -> RegistryResult[Identity]:
        with self._lock:
            owner = self._owners.get(part_id)
        if owner is None:
            return RegistryResult.rejected(NotFoundError(part_id))
        return RegistryResult.accepted(owner)

    def get_part_history(self, part_id: PartID, index: int) -> RegistryResult[HistoryEvent]:
        with self._lock:
            event = self._history.get(part_id, index)
        if event is None:
            return RegistryResult.rejected(NotFoundError(part_id, index))
        return RegistryResult.accepted(event)

    def get_history_count(self, part_id: PartID) -> int:
        """Number of history events for a part; 0 if it was never registered."""
        with self._lock:
            return self._history.count(part_id)

    def get_part_events(self, part_id: PartID) -> list[HistoryEvent]:
        """Full history of a part in order (empty for unknown parts)."""
        with self._lock:
            return self._history.events(part_id)

    def token_exists(self, part_id: PartID) -> bool:
        """Whether the part's token is live (registered and not burned)."""
        with self._lock:
            return part_id in self._tokens

    def get_admin(self) -> Identity:
        with self._lock:
            return self._access.admin

    def is_paused(self) -> bool:
        with self._lock:
            return self._access.paused

    def get_total_parts(self) -> int:
        with self._lock:
            return self._allocator.current

    # =========================================================================
    # Snapshot & replay
    # =========================================================================

    def snapshot(self) -> dict[str, Any]:
        """
        Create a JSON-serializable snapshot of the full registry state.

        The snapshot can be used to:
        - Hand state to the host's storage layer
        - Compare two registries (e.g. after replay)
        - Debug state issues
        """
        with self._lock:
            return {
                "version": SNAPSHOT_VERSION,
                "admin": self._access.admin,
                "paused": self._access.paused,
                "total_parts": self._allocator.current,
                "parts": {
                    str(part_id): {
                        "metadata": metadata.to_dict(),
                        "owner": self._owners.get(part_id),
                        "token": part_id in self._tokens,
                        "history": [e.to_dict() for e in self._history.events(part_id)],
                    }
                    for part_id, metadata in sorted(self._metadata.items())
                },
                "attestation_count": self._attestation_store.count(),
            }

    def replay(self, attestations: list[dict[str, Any]]) -> PartRegistry:
        """
        Replay attestations to reconstruct state.

        Allowed attestations are re-applied in order at their recorded
        logical time; denied ones are skipped since they never changed
        state. The replayed registry logs through a child logger bound
        with ``replay=True`` so its lines are not read as new transitions.

        Args:
            attestations: List of attestation dicts (``Attestation.to_dict``)

        Returns:
            New PartRegistry with replayed state

        Raises:
            ValueError: If a journaled allowed decision is denied on replay
        """
        clock = LogicalClock()
        replayed = PartRegistry(
            config=self.config,
            clock=clock,
            structured_logger=self._log.bind(replay=True),
        )

        for att in attestations:
            if att.get("decision") != "allowed":
                continue

            action = RegistryAction(att["action"])
            clock.set(att["timestamp"])
            method = getattr(replayed, _REPLAY_METHODS[action])
            result = method(att["actor"], **att.get("arguments", {}))

            if not result.ok:
                raise ValueError(
                    f"Replay diverged at attestation {att.get('id')}: "
                    f"{action.value} denied with {int(result.error)}"
                )
            logger.debug("Replayed %s by %s", action.value, att["actor"])

        return replayed

    # =========================================================================
    # Internals
    # =========================================================================

    def _mediate(
        self,
        action: RegistryAction,
        caller: Identity,
        target: PartID | None,
        arguments: dict[str, Any],
        apply: Callable[[], Applied[T]],
    ) -> RegistryResult[T]:
        """
        Run one mutating operation atomically and attest the decision.

        The decision is journaled before it is logged, so a failing log
        stream can never leave a committed transition unattested.
        """
        with self._lock:
            applied: Applied[T] | None = None
            try:
                applied = apply()
            except RegistryError as exc:
                result = RegistryResult.rejected(exc)
            else:
                result = RegistryResult.accepted(applied.value)

            if self.config.record_attestations:
                if action == RegistryAction.REGISTER and result.ok:
                    target = result.value
                self._attestation_store.record(Attestation(
                    id=str(uuid4()),
                    timestamp=self._clock.now(),
                    actor=caller,
                    action=action.value,
                    target=target,
                    decision="allowed" if result.ok else "denied",
                    error_code=None if result.ok else int(result.error),
                    arguments=arguments,
                ))

            if applied is not None:
                self._log.transition(applied.event, caller, **applied.fields)
            else:
                exc = result.exception
                self._log.transition_denied(
                    action.value, caller, int(exc.code), exc.code.name,
                    reason=exc.message, part_id=target,
                )
            return result

    def _append(self, part_id: PartID, event: str, actor: Identity) -> int:
        return self._history.append(part_id, HistoryEvent(event, self._clock.now(), actor))

    def _require_owned_part(self, part_id: PartID) -> tuple[Identity, PartMetadata]:
        owner = self._owners.get(part_id)
        metadata = self._metadata.get(part_id)
        if owner is None or metadata is None:
            raise NotFoundError(part_id)
        return owner, metadata

    @staticmethod
    def _require_not_recycled(part_id: PartID, metadata: PartMetadata) -> None:
        if metadata.recycled:
            raise AlreadyRecycledError(part_id)

    @staticmethod
    def _check_length(field_name: str, value: str, limit: int) -> None:
        if not isinstance(value, str):
            raise TypeError(f"{field_name} must be str, got {type(value).__name__}")
        if len(value) > limit:
            raise InvalidMetadataError(field_name, f"longer than {limit} characters")

    @classmethod
    def _check_text(cls, field_name: str, value: str, limit: int) -> None:
        cls._check_length(field_name, value, limit)
        if not value:
            raise InvalidMetadataError(field_name, "must not be empty")
