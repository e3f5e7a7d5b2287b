"""Central registry for tool lookup and enumeration."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ValidationError

from modusign_mcp.foundation.core import ModusignTool
from modusign_mcp.foundation.errors import ErrorCode, ToolError, ToolException


class ToolRegistry:
    """Registry of tool instances keyed by name.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(DocumentGetTool(client, resolver))
        >>> await registry.execute("document_get", {"documentId": "abc"})
    """

    __slots__ = ("_tools",)

    def __init__(self) -> None:
        self._tools: dict[str, ModusignTool[BaseModel]] = {}

    def register(self, tool: ModusignTool[BaseModel]) -> None:
        """Register a tool instance. Names must be unique."""
        name = tool.metadata.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered. Use unregister() first.")
        self._tools[name] = tool

    def unregister(self, name: str) -> bool:
        """Remove a tool by name. Returns True if found."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> ModusignTool[BaseModel] | None:
        """Get tool by name."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def by_category(self, category: str) -> list[ModusignTool[BaseModel]]:
        return [t for t in self._tools.values() if t.metadata.category == category]

    def categories(self) -> set[str]:
        return {t.metadata.category for t in self._tools.values()}

    async def execute(self, name: str, params: dict[str, Any]) -> str:
        """Validate raw parameters and run the named tool.

        Raises:
            ToolException: Unknown tool, invalid parameters, or a failed call
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolException(ToolError(tool_name=name, message=f"Tool '{name}' not found", code=ErrorCode.NOT_FOUND))
        try:
            validated = tool.params_schema.model_validate(params)
        except ValidationError as e:
            raise ToolException(
                ToolError(tool_name=name, message=f"Invalid parameters: {e}", code=ErrorCode.INVALID_INPUT)
            ) from e
        return await tool.arun(validated)

    def __getitem__(self, name: str) -> ModusignTool[BaseModel]:
        """Get tool by name, raises KeyError if not found."""
        return self._tools[name]

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ModusignTool[BaseModel]]:
        return iter(self._tools.values())
