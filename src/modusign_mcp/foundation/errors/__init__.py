"""Error model: remote API failures, local precondition failures, tool rendering."""

from .errors import (
    CREDENTIALS_GUIDANCE,
    ConfigurationError,
    ErrorCode,
    FileInputError,
    FileReadError,
    ModusignApiError,
    ModusignError,
    ToolError,
    ToolException,
    UploadResponseError,
    format_api_error,
    status_prefix,
)

__all__ = [
    "ErrorCode",
    "ModusignError",
    "ModusignApiError",
    "FileInputError",
    "FileReadError",
    "UploadResponseError",
    "ConfigurationError",
    "ToolError",
    "ToolException",
    "CREDENTIALS_GUIDANCE",
    "format_api_error",
    "status_prefix",
]
