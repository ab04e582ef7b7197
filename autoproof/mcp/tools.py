"""
MCP Tools - Tool definitions for the AutoProof parts registry.

Exposes every registry operation as a named tool that agents and
collaborating services (supply tracking, QA, recalls) can discover
and invoke. Results use the registry's ``{"value": ...}`` /
``{"error": <code>}`` response shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from autoproof.registry import PartRegistry


class ToolCategory(Enum):
    """Categories of MCP tools."""

    MUTATION = "mutation"
    QUERY = "query"
    ADMIN = "admin"


_TYPE_MAP = {
    "string": str,
    "integer": int,
    "boolean": bool,
    "object": dict,
}


class RegistryTool(ABC):
    """
    Base class for registry tools.

    All tools must implement:
    - name: Tool name (e.g., "parts.transfer")
    - description: Human-readable description
    - input_schema: JSON schema for inputs
    - execute(): Execution method
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @property
    @abstractmethod
    def input_schema(self) -> Dict[str, Any]:
        pass

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.MUTATION

    @property
    def requires_caller(self) -> bool:
        """Whether the tool acts on behalf of an authenticated caller."""
        return self.category != ToolCategory.QUERY

    @abstractmethod
    def execute(
        self,
        registry: "PartRegistry",
        arguments: Dict[str, Any],
        caller: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Execute the tool.

        Args:
            registry: Registry instance
            arguments: Tool arguments (already validated)
            caller: Pre-authenticated caller identity

        Returns:
            ``{"value": ...}`` or ``{"error": <code>}``
        """
        pass

    def validate_arguments(self, arguments: Dict[str, Any]) -> None:
        """
        Validate tool arguments against schema.

        Args:
            arguments: Arguments to validate

        Raises:
            ValueError: If validation fails
        """
        schema = self.input_schema
        required = schema.get("required", [])

        for field_name in required:
            if field_name not in arguments:
                raise ValueError(f"Missing required argument: {field_name}")

        properties = schema.get("properties", {})
        for key, value in arguments.items():
            if key not in properties:
                raise ValueError(f"Unknown argument: {key}")

            expected_type = properties[key].get("type")
            expected = _TYPE_MAP.get(expected_type)
            if expected is None:
                continue

            # bool is a subclass of int; never accept it as an id
            if expected is int and isinstance(value, bool):
                raise ValueError(f"Argument '{key}' must be integer, got bool")
            if not isinstance(value, expected):
                raise ValueError(
                    f"Argument '{key}' must be {expected_type}, "
                    f"got {type(value).__name__}"
                )

            minimum = properties[key].get("minimum")
            if minimum is not None and value < minimum:
                raise ValueError(f"Argument '{key}' must be >= {minimum}, got {value}")


def _part_id_schema() -> Dict[str, Any]:
    return {"type": "integer", "description": "Part identifier", "minimum": 0}


def _identity_schema(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


# =============================================================================
# Admin tools
# =============================================================================

class SetPausedTool(RegistryTool):
    """Halt or resume all part transfers."""

    @property
    def name(self) -> str:
        return "registry.set_paused"

    @property
    def description(self) -> str:
        return "Pause or unpause part transfers (admin only)"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "pause": {"type": "boolean", "description": "True to halt transfers"},
            },
            "required": ["pause"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.ADMIN

    def execute(self, registry, arguments, caller=None):
        return registry.set_paused(caller, arguments["pause"]).to_dict()


class TransferAdminTool(RegistryTool):
    """Hand the admin role to another identity."""

    @property
    def name(self) -> str:
        return "registry.transfer_admin"

    @property
    def description(self) -> str:
        return "Transfer the registry admin role (admin only)"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "new_admin": _identity_schema("Identity of the new admin"),
            },
            "required": ["new_admin"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.ADMIN

    def execute(self, registry, arguments, caller=None):
        return registry.transfer_admin(caller, arguments["new_admin"]).to_dict()


# =============================================================================
# Lifecycle tools
# =============================================================================

class RegisterPartTool(RegistryTool):
    """
    Tool for registering a new part.

    Example:
        result = tool.execute(registry, {
            "serial_number": "SN123456",
            "material_spec": "Aluminum-Alloy",
            "origin_factory": "FactoryA",
        }, caller=admin)
        # {"value": 1}
    """

    @property
    def name(self) -> str:
        return "parts.register"

    @property
    def description(self) -> str:
        return "Register a part and mint its token to the caller (admin only)"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "serial_number": {"type": "string", "maxLength": 64},
                "material_spec": {"type": "string", "maxLength": 128},
                "origin_factory": {"type": "string", "maxLength": 64},
            },
            "required": ["serial_number", "material_spec", "origin_factory"],
        }

    def execute(self, registry, arguments, caller=None):
        return registry.register_part(
            caller,
            arguments["serial_number"],
            arguments["material_spec"],
            arguments["origin_factory"],
        ).to_dict()


class TransferPartTool(RegistryTool):
    """Move a part to a new owner (current owner only)."""

    @property
    def name(self) -> str:
        return "parts.transfer"

    @property
    def description(self) -> str:
        return "Transfer a part to a new owner"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "part_id": _part_id_schema(),
                "new_owner": _identity_schema("Recipient identity"),
            },
            "required": ["part_id", "new_owner"],
        }

    def execute(self, registry, arguments, caller=None):
        return registry.transfer_part(
            caller, arguments["part_id"], arguments["new_owner"]
        ).to_dict()


class UpdateStatusTool(RegistryTool):
    """Overwrite a part's status (admin only)."""

    @property
    def name(self) -> str:
        return "parts.update_status"

    @property
    def description(self) -> str:
        return "Set a part's status, e.g. installed or recycled"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "part_id": _part_id_schema(),
                "new_status": {"type": "string", "maxLength": 32},
            },
            "required": ["part_id", "new_status"],
        }

    def execute(self, registry, arguments, caller=None):
        return registry.update_part_status(
            caller, arguments["part_id"], arguments["new_status"]
        ).to_dict()


class BurnPartTool(RegistryTool):
    """Retire a part held by the admin."""

    @property
    def name(self) -> str:
        return "parts.burn"

    @property
    def description(self) -> str:
        return "Burn a part's token and mark it recycled"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"part_id": _part_id_schema()},
            "required": ["part_id"],
        }

    def execute(self, registry, arguments, caller=None):
        return registry.burn_part(caller, arguments["part_id"]).to_dict()


# =============================================================================
# Query tools
# =============================================================================

class PartMetadataTool(RegistryTool):

    @property
    def name(self) -> str:
        return "parts.metadata"

    @property
    def description(self) -> str:
        return "Get a part's metadata"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"part_id": _part_id_schema()},
            "required": ["part_id"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.QUERY

    def execute(self, registry, arguments, caller=None):
        return registry.get_part_metadata(arguments["part_id"]).to_dict()


class PartOwnerTool(RegistryTool):

    @property
    def name(self) -> str:
        return "parts.owner"

    @property
    def description(self) -> str:
        return "Get a part's current owner"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"part_id": _part_id_schema()},
            "required": ["part_id"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.QUERY

    def execute(self, registry, arguments, caller=None):
        return registry.get_part_owner(arguments["part_id"]).to_dict()


class PartHistoryTool(RegistryTool):

    @property
    def name(self) -> str:
        return "parts.history"

    @property
    def description(self) -> str:
        return "Get one entry of a part's history (index starts at 1)"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "part_id": _part_id_schema(),
                "index": {"type": "integer", "minimum": 0},
            },
            "required": ["part_id", "index"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.QUERY

    def execute(self, registry, arguments, caller=None):
        return registry.get_part_history(arguments["part_id"], arguments["index"]).to_dict()


class HistoryCountTool(RegistryTool):

    @property
    def name(self) -> str:
        return "parts.history_count"

    @property
    def description(self) -> str:
        return "Number of history entries for a part (0 if unknown)"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"part_id": _part_id_schema()},
            "required": ["part_id"],
        }

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.QUERY

    def execute(self, registry, arguments, caller=None):
        return {"value": registry.get_history_count(arguments["part_id"])}


class RegistryInfoTool(RegistryTool):
    """One tool per registry-wide read (admin, paused, total parts)."""

    _READERS = {
        "registry.admin": ("Current admin identity", "get_admin"),
        "registry.paused": ("Whether transfers are paused", "is_paused"),
        "registry.total_parts": ("Number of parts ever registered", "get_total_parts"),
    }

    def __init__(self, tool_name: str):
        if tool_name not in self._READERS:
            raise ValueError(f"Unknown registry info tool: {tool_name}")
        self._name = tool_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._READERS[self._name][0]

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    @property
    def category(self) -> ToolCategory:
        return ToolCategory.QUERY

    def execute(self, registry, arguments, caller=None):
        return {"value": getattr(registry, self._READERS[self._name][1])()}


class ToolRegistry:
    """
    Registry for MCP tools.

    Manages tool registration, discovery, lookup and dispatch against
    one PartRegistry.
    """

    def __init__(self, registry: "PartRegistry", tools: Optional[List[RegistryTool]] = None):
        self._registry = registry
        self._tools: Dict[str, RegistryTool] = {}
        for tool in tools if tools is not None else create_default_tools():
            self.register(tool)

    def register(self, tool: RegistryTool) -> None:
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> bool:
        if name in self._tools:
            del self._tools[name]
            return True
        return False

    def get_tool(self, name: str) -> Optional[RegistryTool]:
        return self._tools.get(name)

    def list_tools(self) -> Dict[str, RegistryTool]:
        return self._tools.copy()

    def list_by_category(self, category: ToolCategory) -> List[RegistryTool]:
        return [
            tool for tool in self._tools.values()
            if tool.category == category
        ]

    def describe(self) -> List[Dict[str, Any]]:
        """Tool listing in MCP ``tools/list`` shape."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema,
            }
            for tool in self._tools.values()
        ]

    def call(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        caller: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Validate and execute a tool.

        Raises:
            KeyError: Unknown tool
            ValueError: Malformed arguments or missing caller
        """
        tool = self._tools.get(name)
        if tool is None:
            raise KeyError(f"Unknown tool: {name}")

        arguments = arguments or {}
        tool.validate_arguments(arguments)
        if tool.requires_caller and not caller:
            raise ValueError(f"Tool '{name}' requires an authenticated caller")

        return tool.execute(self._registry, arguments, caller)


def create_default_tools() -> List[RegistryTool]:
    """
    Create the default set of MCP tools.

    Returns:
        List of default tool instances
    """
    return [
        SetPausedTool(),
        TransferAdminTool(),
        RegisterPartTool(),
        TransferPartTool(),
        UpdateStatusTool(),
        BurnPartTool(),
        PartMetadataTool(),
        PartOwnerTool(),
        PartHistoryTool(),
        HistoryCountTool(),
        RegistryInfoTool("registry.admin"),
        RegistryInfoTool("registry.paused"),
        RegistryInfoTool("registry.total_parts"),
    ]
