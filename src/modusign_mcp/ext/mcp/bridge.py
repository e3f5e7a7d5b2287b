"""Bridge between ModusignTool and MCP tool primitives.

FastMCP derives a tool's input schema from the handler's signature, so each
handler gets a synthesized keyword-only signature mirroring the tool's params
schema: one parameter per field, named by its wire alias, carrying the field's
type, constraints and description.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Annotated, Any

from fastmcp.exceptions import ToolError as McpToolError
from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo

from modusign_mcp.foundation.errors import ErrorCode, ToolError, ToolException

if TYPE_CHECKING:
    from modusign_mcp.foundation.core import ModusignTool
    from modusign_mcp.foundation.registry import ToolRegistry

Handler = Callable[..., Awaitable[str]]


def tool_to_handler(tool: ModusignTool[BaseModel]) -> Handler:
    """Convert a tool to an MCP-compatible handler function.

    Creates a callable that:
    - Accepts keyword arguments named by the schema's wire aliases
    - Validates them via the params schema
    - Returns the tool's JSON text, or raises an MCP ToolError carrying the rendered failure

    Args:
        tool: Tool instance to wrap

    Returns:
        Async function suitable for MCP tool registration
    """
    schema = tool.params_schema
    name = tool.metadata.name

    async def handler(**kwargs: Any) -> str:
        try:
            params = schema.model_validate({k: v for k, v in kwargs.items() if v is not None})
        except ValidationError as e:
            error = ToolError(tool_name=name, message=f"Invalid parameters: {e}", code=ErrorCode.INVALID_INPUT)
            raise McpToolError(error.render()) from e
        try:
            return await tool.arun(params)
        except ToolException as e:
            raise McpToolError(e.error.render()) from e

    handler.__name__ = name
    handler.__doc__ = tool.metadata.description
    handler.__signature__ = build_signature(schema)  # type: ignore[attr-defined]
    handler.__annotations__ = {
        p.name: p.annotation for p in handler.__signature__.parameters.values()  # type: ignore[attr-defined]
    } | {"return": str}
    return handler


def build_signature(schema: type[BaseModel]) -> inspect.Signature:
    """Keyword-only signature mirroring a params schema (required fields first)."""
    params = [
        inspect.Parameter(
            field_name(name, info),
            inspect.Parameter.KEYWORD_ONLY,
            default=inspect.Parameter.empty if info.is_required() else info.get_default(call_default_factory=True),
            annotation=_annotation(info),
        )
        for name, info in schema.model_fields.items()
    ]
    params.sort(key=lambda p: p.default is not inspect.Parameter.empty)
    return inspect.Signature(params, return_annotation=str)


def field_name(name: str, info: FieldInfo) -> str:
    return info.alias or name


def _annotation(info: FieldInfo) -> Any:
    field_kwargs: dict[str, Any] = {"description": info.description}
    if info.discriminator is not None:
        field_kwargs["discriminator"] = info.discriminator
    return Annotated[(info.annotation, *info.metadata, Field(**field_kwargs))]  # type: ignore[misc]


def get_tool_schema(tool: ModusignTool[BaseModel]) -> dict[str, object]:
    """JSON schema of a tool's params, as MCP clients see it."""
    schema = tool.params_schema.model_json_schema(by_alias=True)
    schema.pop("title", None)
    return schema


def registry_to_handlers(registry: ToolRegistry, *, enabled_only: bool = True) -> dict[str, Handler]:
    """Convert all registry tools to MCP handlers keyed by tool name."""
    return {
        tool.metadata.name: tool_to_handler(tool)
        for tool in registry
        if not enabled_only or tool.metadata.enabled
    }
