"""Label tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from modusign_mcp.foundation.core import ModusignTool, ToolMetadata, ToolParams, segment

from .schemas import PageParams

CATEGORY = "labels"


class LabelCreateParams(ToolParams):
    name: str = Field(min_length=1, max_length=50, description="Label name")
    color: str | None = Field(default=None, description="Optional label color (hex code, e.g. #FF6B6B)")


class LabelIdParams(ToolParams):
    label_id: str = Field(min_length=1, description="Label ID")


class LabelUpdateParams(LabelIdParams):
    name: str | None = Field(default=None, min_length=1, max_length=50, description="Label name")
    color: str | None = Field(default=None, description="Label color")


class LabelListTool(ModusignTool[PageParams]):
    metadata = ToolMetadata(name="label_list", description="List labels with pagination.", category=CATEGORY)
    params_schema = PageParams

    async def _async_run(self, params: PageParams) -> Any:
        return await self.client.get("/labels", params.wire())


class LabelCreateTool(ModusignTool[LabelCreateParams]):
    metadata = ToolMetadata(name="label_create", description="Create a label.", category=CATEGORY)
    params_schema = LabelCreateParams

    async def _async_run(self, params: LabelCreateParams) -> Any:
        return await self.client.post("/labels", params.wire())


class LabelUpdateTool(ModusignTool[LabelUpdateParams]):
    metadata = ToolMetadata(name="label_update", description="Update a label's name or color.", category=CATEGORY)
    params_schema = LabelUpdateParams

    async def _async_run(self, params: LabelUpdateParams) -> Any:
        return await self.client.put(f"/labels/{segment(params.label_id)}", params.wire(exclude={"label_id"}))


class LabelDeleteTool(ModusignTool[LabelIdParams]):
    metadata = ToolMetadata(name="label_delete", description="Delete a label.", category=CATEGORY)
    params_schema = LabelIdParams

    async def _async_run(self, params: LabelIdParams) -> Any:
        return await self.client.delete(f"/labels/{segment(params.label_id)}")


LABEL_TOOLS: tuple[type[ModusignTool[Any]], ...] = (LabelListTool, LabelCreateTool, LabelUpdateTool, LabelDeleteTool)
