"""Modusign MCP - document-signing tools for AI agents over the Model Context Protocol.

The core is an authenticated request executor with throttle retry
(``ModusignClient``) and a file resolver that turns local paths, inline base64
or existing references into the ``{fileId, token}`` pairs the service expects
(``FileRefResolver``). The tool layer maps each remote operation onto a typed
parameter schema and serves them through FastMCP.

Quick Start:
    >>> from modusign_mcp import ModusignClient, FileRefResolver, build_registry
    >>>
    >>> async with ModusignClient("me@example.com", "api-key") as client:
    ...     resolver = FileRefResolver(client)
    ...     ref = await resolver.resolve(
    ...         {"type": "FILE_PATH", "filePath": "/Users/me/contract.pdf"}, "document", "document",
    ...     )
    ...     registry = build_registry(client, resolver)
    ...     print(await registry.execute("document_list", {"status": "ON_GOING"}))

Run as a server:
    $ MODUSIGN_EMAIL=... MODUSIGN_API_KEY=... python -m modusign_mcp
"""

from modusign_mcp.client import ModusignClient, MultipartForm, ThrottlePolicy, build_odata_filter
from modusign_mcp.files import (
    AttachmentFile,
    Base64FileInput,
    FilePathInput,
    FileRef,
    FileRefInput,
    FileRefResolver,
    normalize_attachments,
)
from modusign_mcp.foundation.config import ModusignSettings, get_settings
from modusign_mcp.foundation.errors import (
    ConfigurationError,
    ErrorCode,
    FileInputError,
    FileReadError,
    ModusignApiError,
    ModusignError,
    UploadResponseError,
)
from modusign_mcp.tools import build_registry

__version__ = "1.0.0"

__all__ = [
    "AttachmentFile",
    "Base64FileInput",
    "ConfigurationError",
    "ErrorCode",
    "FileInputError",
    "FilePathInput",
    "FileReadError",
    "FileRef",
    "FileRefInput",
    "FileRefResolver",
    "ModusignApiError",
    "ModusignClient",
    "ModusignError",
    "ModusignSettings",
    "MultipartForm",
    "ThrottlePolicy",
    "UploadResponseError",
    "build_odata_filter",
    "build_registry",
    "get_settings",
    "normalize_attachments",
]
