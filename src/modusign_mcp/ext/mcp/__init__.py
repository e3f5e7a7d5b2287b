"""MCP (Model Context Protocol) integration.

Exposes the Modusign tools via FastMCP over stdio.
"""

from .bridge import build_signature, get_tool_schema, registry_to_handlers, tool_to_handler
from .server import MCPServer, Transport

__all__ = [
    "MCPServer",
    "Transport",
    "build_signature",
    "get_tool_schema",
    "registry_to_handlers",
    "tool_to_handler",
]
