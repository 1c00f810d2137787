"""Static catalog of the tools this server exposes."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

DEFAULT_MOUNT_POINT = "/"
DEFAULT_PROCESS_LIMIT = 5

_NO_ARGUMENTS: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass(slots=True, frozen=True)
class ToolDescriptor:
    """Name, description and JSON input schema of one tool."""

    name: str
    description: str
    input_schema: MappingProxyType

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for the discovery response."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, MappingProxyType):
        return {key: _thaw(item) for key, item in value.items()}
    return value


def _tool(name: str, description: str, schema: dict[str, Any] | None = None) -> ToolDescriptor:
    return ToolDescriptor(name, description, _freeze(schema or _NO_ARGUMENTS))


def build_catalog() -> tuple[ToolDescriptor, ...]:
    """Build the ordered tool list."""
    return (
        _tool("cpu", "Get CPU load averages and core count"),
        _tool("memory", "Get memory usage (total, used, free, percentage)"),
        _tool(
            "disk",
            "Get disk usage for mount point",
            {
                "type": "object",
                "properties": {
                    "mount_point": {
                        "type": "string",
                        "default": DEFAULT_MOUNT_POINT,
                        "description": "Mount point to check",
                    },
                },
            },
        ),
        _tool("uptime", "Get system uptime"),
        _tool(
            "processes",
            "Get running process count and top memory consumers",
            {
                "type": "object",
                "properties": {
                    "limit": {
                        "type": "integer",
                        "default": DEFAULT_PROCESS_LIMIT,
                        "description": "Number of top processes to return",
                    },
                },
            },
        ),
        _tool("all", "Get all system statistics at once"),
    )


TOOL_CATALOG = build_catalog()
