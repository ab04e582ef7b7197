"""
AutoProof Registry Module — NFT-backed part lifecycle and provenance

This module provides:
- Access control (single admin, global transfer pause)
- Gap-free part identifier allocation
- Lifecycle store (metadata, ownership, token existence, status)
- Append-only per-part history, indexed from 1
- A decision journal with snapshot and replay

Lifecycle:

    register ──► active ──┬── transfer (owner only, not while paused)
                          ├── update status (admin, any text)
                          └── burn (admin who owns it) ──► recycled

    recycled is terminal: no transfer, status update or burn succeeds.

Integration Architecture:
    ┌─────────────────────────────────────────────────────┐
    │     Supply tracking / QA / recall services          │
    └──────────────────────┬──────────────────────────────┘
                           │  tool calls (autoproof.mcp)
                           ▼
    ┌─────────────────────────────────────────────────────┐
    │                  PartRegistry                       │
    │  AccessControl → validation → lifecycle store       │
    │                              → HistoryLog.append    │
    │                              → AttestationStore     │
    └─────────────────────────────────────────────────────┘
"""

from .access import AccessControl
from .allocator import IdentifierAllocator
from .clock import Clock, LogicalClock
from .history import HistoryLog
from .registry import Attestation, AttestationStore, PartRegistry
from .states import (
    NULL_IDENTITY,
    EventKind,
    HistoryEvent,
    Identity,
    PartID,
    PartMetadata,
    PartStatus,
    status_event_tag,
)
from .transitions import DecisionKind, RegistryAction, RegistryResult
from .errors import (
    ErrorCode,
    RegistryError,
    NotAuthorizedError,
    AlreadyRegisteredError,
    NotFoundError,
    PausedError,
    ZeroAddressError,
    InvalidMetadataError,
    NotOwnerError,
    AlreadyRecycledError,
    error_class,
)

__all__ = [
    # Registry
    "PartRegistry",
    # Components
    "AccessControl",
    "IdentifierAllocator",
    "HistoryLog",
    "Clock",
    "LogicalClock",
    # States
    "NULL_IDENTITY",
    "Identity",
    "PartID",
    "PartStatus",
    "PartMetadata",
    "HistoryEvent",
    "EventKind",
    "status_event_tag",
    # Transitions
    "RegistryAction",
    "RegistryResult",
    "DecisionKind",
    # Attestations
    "Attestation",
    "AttestationStore",
    # Errors
    "ErrorCode",
    "RegistryError",
    "NotAuthorizedError",
    "AlreadyRegisteredError",
    "NotFoundError",
    "PausedError",
    "ZeroAddressError",
    "InvalidMetadataError",
    "NotOwnerError",
    "AlreadyRecycledError",
    "error_class",
]
