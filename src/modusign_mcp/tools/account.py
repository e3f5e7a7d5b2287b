"""Account tools: current user, subscription and usage."""

from __future__ import annotations

from typing import Any, ClassVar

from modusign_mcp.foundation.core import EmptyParams, ModusignTool, ToolMetadata

CATEGORY = "account"


class _AccountReadTool(ModusignTool[EmptyParams]):
    params_schema = EmptyParams
    path: ClassVar[str]

    async def _async_run(self, params: EmptyParams) -> Any:
        return await self.client.get(self.path)


class UserGetMeTool(_AccountReadTool):
    metadata = ToolMetadata(
        name="user_get_me",
        description="Get information about the currently authenticated user (name, email, plan, etc).",
        category=CATEGORY,
    )
    path = "/user"


class SubscriptionGetTool(_AccountReadTool):
    metadata = ToolMetadata(
        name="subscription_get",
        description="Get the account's current subscription plan.",
        category=CATEGORY,
    )
    path = "/subscription"


class UsageGetTool(_AccountReadTool):
    metadata = ToolMetadata(
        name="usage_get",
        description="Get the account's usage against its plan limits.",
        category=CATEGORY,
    )
    path = "/usages"


ACCOUNT_TOOLS: tuple[type[ModusignTool[Any]], ...] = (UserGetMeTool, SubscriptionGetTool, UsageGetTool)
