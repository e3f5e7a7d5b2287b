"""FastMCP server exposing the tool registry to MCP clients.

Example:
    >>> server = MCPServer("modusign-mcp", registry)
    >>> server.run()  # stdio
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from fastmcp import FastMCP

from modusign_mcp.runtime.observability import get_logger

from .bridge import get_tool_schema, tool_to_handler

if TYPE_CHECKING:
    from modusign_mcp.foundation.registry import ToolRegistry

Transport = Literal["stdio", "sse", "streamable-http"]

log = get_logger("modusign_mcp.server")


class MCPServer:
    """FastMCP-backed server for MCP clients (Claude Desktop, Cursor, VS Code, ...)."""

    __slots__ = ("_name", "_registry", "_mcp")

    def __init__(self, name: str, registry: ToolRegistry) -> None:
        self._name = name
        self._registry = registry
        self._mcp = self._create_server()

    @property
    def name(self) -> str:
        return self._name

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def fastmcp(self) -> FastMCP:
        """Access underlying FastMCP instance."""
        return self._mcp

    def _create_server(self) -> FastMCP:
        mcp: FastMCP = FastMCP(self._name)
        for tool in self._registry:
            if not tool.metadata.enabled:
                continue
            mcp.tool(name=tool.metadata.name, description=tool.metadata.description)(tool_to_handler(tool))
        log.debug("tools registered", count=len(self._registry))
        return mcp

    def list_tools(self) -> list[dict[str, object]]:
        """List all enabled tools with their parameter schemas."""
        return [
            {
                "name": tool.metadata.name,
                "description": tool.metadata.description,
                "category": tool.metadata.category,
                "parameters": get_tool_schema(tool),
            }
            for tool in self._registry
            if tool.metadata.enabled
        ]

    def run(self, transport: Transport = "stdio", *, host: str = "127.0.0.1", port: int = 8080) -> None:
        """Start the server (blocking)."""
        if transport == "stdio":
            self._mcp.run()
        else:
            self._mcp.run(transport=transport, host=host, port=port)

    async def run_async(self, transport: Transport = "stdio") -> None:
        """Serve on the current event loop until the transport closes."""
        await self._mcp.run_async(transport=transport)
