"""Process entry point: settings -> logging -> client -> tools -> stdio server."""

from __future__ import annotations

import asyncio
import sys

from modusign_mcp.client import ModusignClient
from modusign_mcp.ext.mcp import MCPServer
from modusign_mcp.files import FileRefResolver, build_file_reader
from modusign_mcp.foundation.config import ModusignSettings, get_settings
from modusign_mcp.foundation.errors import ConfigurationError
from modusign_mcp.runtime.observability import configure_logging, get_logger
from modusign_mcp.tools import build_registry

SERVER_NAME = "modusign-mcp"

SETUP_GUIDANCE = """\
Set them in your MCP client configuration or export them:
  export MODUSIGN_EMAIL="your@email.com"
  export MODUSIGN_API_KEY="your-api-key"

Get your API key from: https://app.modusign.co.kr/settings/api"""

log = get_logger("modusign_mcp.cli")


async def serve(settings: ModusignSettings) -> None:
    """Run the stdio server until the client disconnects."""
    async with ModusignClient.from_settings(settings) as client:
        resolver = FileRefResolver(client, build_file_reader(settings.files.shell_fallback))
        server = MCPServer(SERVER_NAME, build_registry(client, resolver))
        log.info("server starting", base_url=client.base_url, tools=len(server.registry))
        await server.run_async()


def main() -> int:
    settings = get_settings()
    configure_logging(settings.logging.format, settings.logging.level)
    try:
        settings.require_credentials()
    except ConfigurationError as exc:
        print(f"Error: {exc.message}\n\n{SETUP_GUIDANCE}", file=sys.stderr)
        return 1
    asyncio.run(serve(settings))
    return 0
