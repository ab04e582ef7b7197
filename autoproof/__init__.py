"""
AutoProof v1.0 - NFT-backed provenance registry for automotive parts.

Architecture:
    AccessControl → IdentifierAllocator → Lifecycle store → HistoryLog

Public API (stable):
    PartRegistry    - The registry. Every mutation returns a RegistryResult.
    RegistryResult  - ``.ok``, ``.value``, ``.error`` (ErrorCode), ``.unwrap()``.
    RegistryConfig  - Admin identity, null identity, storage bounds.
    ErrorCode       - Stable numeric error taxonomy (100-107).

Submodules:
    registry        - State machine, history log, attestations, replay
    mcp             - Tool surface for collaborating services and agents
    monitoring      - Structured JSON logging

Example:
    from autoproof import PartRegistry

    registry = PartRegistry()
    admin = registry.get_admin()

    part_id = registry.register_part(
        admin, "SN123456", "Aluminum-Alloy", "FactoryA"
    ).unwrap()
    registry.transfer_part(admin, part_id, "ST2CY5...")

    registry.get_history_count(part_id)     # 2
    registry.get_part_history(part_id, 2)   # transferred by admin
"""

__version__ = "1.0.0"

from autoproof.config import RegistryConfig
from autoproof.registry import (
    NULL_IDENTITY,
    ErrorCode,
    HistoryEvent,
    LogicalClock,
    PartMetadata,
    PartRegistry,
    PartStatus,
    RegistryError,
    RegistryResult,
)

__all__ = [
    "__version__",
    "RegistryConfig",
    "PartRegistry",
    "RegistryResult",
    "RegistryError",
    "ErrorCode",
    "PartMetadata",
    "PartStatus",
    "HistoryEvent",
    "LogicalClock",
    "NULL_IDENTITY",
]
