"""Core tool abstractions.

- ModusignTool: Abstract base class for all tools
- ToolMetadata: Tool metadata
- ToolParams / EmptyParams: Parameter schema bases (camelCase wire aliases)
"""

from .base import (
    EmptyParams,
    ModusignTool,
    ToolMetadata,
    ToolParams,
    compact,
    render_json,
    segment,
)

__all__ = [
    "EmptyParams",
    "ModusignTool",
    "ToolMetadata",
    "ToolParams",
    "compact",
    "render_json",
    "segment",
]
