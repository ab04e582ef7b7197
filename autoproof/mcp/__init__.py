"""
MCP integration for the AutoProof registry.

Every registry operation is published as a named tool:

    registry.set_paused, registry.transfer_admin,
    registry.admin, registry.paused, registry.total_parts,
    parts.register, parts.transfer, parts.update_status, parts.burn,
    parts.metadata, parts.owner, parts.history, parts.history_count

Example:
    from autoproof import PartRegistry
    from autoproof.mcp import ToolRegistry

    tools = ToolRegistry(PartRegistry())
    tools.call("parts.register", {
        "serial_number": "SN123456",
        "material_spec": "Aluminum-Alloy",
        "origin_factory": "FactoryA",
    }, caller=admin)
"""

from autoproof.mcp.tools import (
    ToolCategory,
    RegistryTool,
    SetPausedTool,
    TransferAdminTool,
    RegisterPartTool,
    TransferPartTool,
    UpdateStatusTool,
    BurnPartTool,
    PartMetadataTool,
    PartOwnerTool,
    PartHistoryTool,
    HistoryCountTool,
    RegistryInfoTool,
    ToolRegistry,
    create_default_tools,
)

__all__ = [
    "ToolCategory",
    "RegistryTool",
    "SetPausedTool",
    "TransferAdminTool",
    "RegisterPartTool",
    "TransferPartTool",
    "UpdateStatusTool",
    "BurnPartTool",
    "PartMetadataTool",
    "PartOwnerTool",
    "PartHistoryTool",
    "HistoryCountTool",
    "RegistryInfoTool",
    "ToolRegistry",
    "create_default_tools",
]
