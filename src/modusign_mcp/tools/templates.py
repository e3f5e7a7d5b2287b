"""Template tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from modusign_mcp.foundation.core import ModusignTool, ToolMetadata, ToolParams, segment

from .schemas import PageParams

CATEGORY = "templates"


class TemplateIdParams(ToolParams):
    template_id: str = Field(min_length=1, description="Template ID")


class TemplateListTool(ModusignTool[PageParams]):
    metadata = ToolMetadata(
        name="template_list",
        description="List available document templates with pagination.",
        category=CATEGORY,
    )
    params_schema = PageParams

    async def _async_run(self, params: PageParams) -> Any:
        return await self.client.get("/templates", params.wire())


class TemplateGetTool(ModusignTool[TemplateIdParams]):
    metadata = ToolMetadata(
        name="template_get",
        description="Get detailed information of a template including roles, input fields, and configuration.",
        category=CATEGORY,
    )
    params_schema = TemplateIdParams

    async def _async_run(self, params: TemplateIdParams) -> Any:
        return await self.client.get(f"/templates/{segment(params.template_id)}")


TEMPLATE_TOOLS: tuple[type[ModusignTool[Any]], ...] = (TemplateListTool, TemplateGetTool)
