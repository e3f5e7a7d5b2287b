"""Core tool abstractions: ModusignTool, ToolMetadata, and parameter base types.

A tool maps one remote operation onto a typed parameter schema. Subclasses
declare ``metadata`` and ``params_schema`` and implement ``_async_run``,
returning the decoded response; ``arun`` renders it as indented JSON and turns
any ModusignError into a ToolException.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar
from urllib.parse import quote

import orjson
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from modusign_mcp.foundation.errors import ModusignError, ToolError, ToolException
from modusign_mcp.runtime.observability import get_logger

if TYPE_CHECKING:
    from modusign_mcp.client import ModusignClient
    from modusign_mcp.files import FileRefResolver

log = get_logger("modusign_mcp.tools")


class ToolMetadata(BaseModel):
    """Metadata describing a tool.

    Attributes:
        name: Unique identifier (snake_case, e.g., "document_get")
        description: What the tool does (shown to the LLM for selection)
        category: Grouping category ("documents", "templates", ...)
        enabled: Whether the tool is exposed by servers
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[a-z][a-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: str = Field(default="general")
    enabled: bool = Field(default=True)


class ToolParams(BaseModel):
    """Base for parameter schemas: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def wire(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Request body: camelCase keys, unset optionals dropped."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


class EmptyParams(ToolParams):
    """Parameter schema for tools with no inputs."""


TParams = TypeVar("TParams", bound=BaseModel)


def segment(value: str) -> str:
    """Quote an identifier for use as a single path segment."""
    return quote(value, safe="")


def compact(body: dict[str, Any]) -> dict[str, Any]:
    """Drop top-level None values from a request body."""
    return {k: v for k, v in body.items() if v is not None}


def render_json(data: Any) -> str:
    """Indented JSON text for LLM consumption; non-ASCII is kept as-is."""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2, default=str).decode()


class ModusignTool(ABC, Generic[TParams]):
    """Abstract base class for all Modusign tools.

    Subclasses must:
    - Define `metadata` class variable with ToolMetadata
    - Define `params_schema` class variable with the parameter model
    - Implement `_async_run(params)` returning the decoded response

    Example:
        >>> class DocumentGetTool(ModusignTool[DocumentIdParams]):
        ...     metadata = ToolMetadata(
        ...         name="document_get",
        ...         description="Get detailed information of a specific document",
        ...         category="documents",
        ...     )
        ...     params_schema = DocumentIdParams
        ...
        ...     async def _async_run(self, params: DocumentIdParams) -> Any:
        ...         return await self.client.get(f"/documents/{segment(params.document_id)}")
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[BaseModel]] = EmptyParams

    def __init__(self, client: ModusignClient, resolver: FileRefResolver) -> None:
        self.client = client
        self.resolver = resolver

    @abstractmethod
    async def _async_run(self, params: TParams) -> Any:
        """Call the remote operation and return its decoded result."""
        ...

    async def arun(self, params: TParams) -> str:
        """Execute and render as JSON.

        Raises:
            ToolException: The client or resolver raised a ModusignError
        """
        name = self.metadata.name
        try:
            result = await self._async_run(params)
        except ModusignError as exc:
            log.warning("tool failed", tool=name, code=str(exc.code), error=exc.message)
            raise ToolException(ToolError.from_exception(name, exc)) from exc
        log.debug("tool completed", tool=name)
        return render_json(result)

    async def acall(self, **kwargs: Any) -> str:
        """Validate keyword arguments against the schema and execute."""
        return await self.arun(self.params_schema.model_validate(kwargs))  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.metadata.name!r})"
