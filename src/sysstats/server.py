"""MCP stdio server exposing the system-stats tools."""

from typing import Any

import anyio
import mcp.types as types
import structlog
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from sysstats.catalog import TOOL_CATALOG, ToolDescriptor
from sysstats.config import Settings, get_settings
from sysstats.dispatcher import Dispatcher
from sysstats.logger import configure_logging
from sysstats.monitor import SystemMonitor

SERVER_NAME = "system-stats"

log = structlog.get_logger(__name__)


class ToolCallFailed(Exception):
    """Raised inside the call handler so the SDK flags the result as an error."""


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    """Convert a catalog entry into the SDK's tool type."""
    fields = descriptor.to_dict()
    return types.Tool(
        name=fields["name"],
        description=fields["description"],
        inputSchema=fields["inputSchema"],
    )


def build_dispatcher(settings: Settings) -> Dispatcher:
    """Wire catalog, monitor and dispatcher from settings."""
    monitor = SystemMonitor(timeout=settings.command_timeout)
    return Dispatcher(TOOL_CATALOG, monitor, max_limit=settings.max_process_limit)


def create_server(dispatcher: Dispatcher) -> Server:
    """Create the MCP server and register the discovery and call handlers."""
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(tool) for tool in dispatcher.list_tools()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        response = await dispatcher.handle(name, arguments)
        if response.is_error:
            raise ToolCallFailed(response.text)
        return [types.TextContent(type="text", text=response.text)]

    return server


async def serve(server: Server) -> None:
    """Run ``server`` over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        log.info("server_started", server=SERVER_NAME, transport="stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Entry point for the system-stats server."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    server = create_server(build_dispatcher(settings))
    anyio.run(serve, server)


if __name__ == "__main__":
    main()
