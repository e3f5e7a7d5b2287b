"""Modusign API tools.

Each module maps one resource family onto ModusignTool subclasses;
``build_registry`` instantiates all of them against a shared client and resolver.

Example:
    >>> async with ModusignClient.from_settings(get_settings()) as client:
    ...     registry = build_registry(client, FileRefResolver(client))
    ...     print(await registry.execute("document_get", {"documentId": "abc"}))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from modusign_mcp.foundation.core import ModusignTool
from modusign_mcp.foundation.registry import ToolRegistry

from .account import ACCOUNT_TOOLS
from .documents import DOCUMENT_TOOLS
from .files import FILE_TOOLS
from .labels import LABEL_TOOLS
from .templates import TEMPLATE_TOOLS
from .webhooks import WEBHOOK_TOOLS

if TYPE_CHECKING:
    from modusign_mcp.client import ModusignClient
    from modusign_mcp.files import FileRefResolver

ALL_TOOLS: tuple[type[ModusignTool[Any]], ...] = (
    *DOCUMENT_TOOLS,
    *TEMPLATE_TOOLS,
    *FILE_TOOLS,
    *ACCOUNT_TOOLS,
    *LABEL_TOOLS,
    *WEBHOOK_TOOLS,
)


def build_registry(client: ModusignClient, resolver: FileRefResolver) -> ToolRegistry:
    """Registry holding one instance of every tool."""
    registry = ToolRegistry()
    for tool_cls in ALL_TOOLS:
        registry.register(tool_cls(client, resolver))
    return registry


__all__ = ["ALL_TOOLS", "build_registry"]
