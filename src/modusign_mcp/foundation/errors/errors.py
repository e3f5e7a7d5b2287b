"""Error model for the Modusign client.

Two families live here:

- ModusignApiError: the only failure the request executor raises, carrying the
  final non-2xx status code and the decoded (or raw text) error payload.
- Local precondition errors: bad file inputs, unreadable paths, unexpected
  upload responses and missing credentials. These never cross into
  ModusignApiError and are never retried.

ToolError/ToolException render any of the above for the tool layer.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(StrEnum):
    """Machine-readable classification of client failures."""
    VALIDATION_FAILED = "VALIDATION_FAILED"
    API_KEY_INVALID = "API_KEY_INVALID"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    REMOTE_ERROR = "REMOTE_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION = "CONFIGURATION"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    UNEXPECTED_RESPONSE = "UNEXPECTED_RESPONSE"


# Known statuses -> (display prefix, code). Anything else renders as "HTTP <code>".
_STATUS_TABLE: dict[int, tuple[str, ErrorCode]] = {
    400: ("Bad Request - Validation failed", ErrorCode.VALIDATION_FAILED),
    401: ("Unauthorized - Invalid email or API key", ErrorCode.API_KEY_INVALID),
    403: ("Forbidden - Insufficient permissions or usage limit exceeded", ErrorCode.PERMISSION_DENIED),
    404: ("Not Found - Resource does not exist", ErrorCode.NOT_FOUND),
    429: ("Rate Limit Exceeded", ErrorCode.RATE_LIMITED),
}

_AUTH_CODES: frozenset[ErrorCode] = frozenset({ErrorCode.API_KEY_INVALID, ErrorCode.PERMISSION_DENIED})

CREDENTIALS_GUIDANCE = (
    "Check the MODUSIGN_EMAIL and MODUSIGN_API_KEY environment variables in your MCP client "
    "configuration. API keys are issued at https://app.modusign.co.kr/settings/api"
)


def status_prefix(status_code: int) -> str:
    """Display prefix for a status code."""
    known = _STATUS_TABLE.get(status_code)
    return known[0] if known else f"HTTP {status_code}"


def format_api_error(status_code: int, error_body: object) -> str:
    """Build the display message for a failed response.

    Uses the payload's ``message`` field when it is a string, otherwise the
    JSON serialization of the whole payload (text payloads included).
    """
    prefix = status_prefix(status_code)
    if isinstance(error_body, dict) and isinstance(error_body.get("message"), str):
        return f"{prefix}: {error_body['message']}"
    try:
        detail = json.dumps(error_body, ensure_ascii=False)
    except (TypeError, ValueError):
        detail = str(error_body)
    return f"{prefix}: {detail}"


class ModusignError(Exception):
    """Base class for every failure raised by this package."""

    code: ErrorCode = ErrorCode.REMOTE_ERROR

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def is_auth_error(self) -> bool:
        return self.code in _AUTH_CODES


class ModusignApiError(ModusignError):
    """Non-2xx final response from the remote service.

    Attributes:
        status_code: HTTP status of the final response
        error_body: Decoded JSON payload, or the raw text if it was not JSON
    """

    def __init__(self, status_code: int, error_body: object) -> None:
        known = _STATUS_TABLE.get(status_code)
        super().__init__(
            format_api_error(status_code, error_body),
            code=known[1] if known else ErrorCode.REMOTE_ERROR,
        )
        self.status_code = status_code
        self.error_body = error_body

    def __repr__(self) -> str:
        return f"ModusignApiError(status_code={self.status_code}, message={self.message!r})"


class FileInputError(ModusignError):
    """A file input is missing a required alternative or carries an undecodable payload."""

    code = ErrorCode.INVALID_INPUT


class FileReadError(ModusignError):
    """A local path could not be read by any configured reader."""

    code = ErrorCode.FILE_UNREADABLE

    def __init__(self, path: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"Unable to read local file '{path}'{detail}. "
            "If the file is not visible to this server, send it inline instead "
            '({"type": "BASE64", "base64": ..., "fileName": ...}).'
        )
        self.path = path


class UploadResponseError(ModusignError):
    """The /files endpoint answered with a shape carrying no fileId/token pair."""

    code = ErrorCode.UNEXPECTED_RESPONSE

    def __init__(self, response: object) -> None:
        try:
            raw = json.dumps(response, ensure_ascii=False)
        except (TypeError, ValueError):
            raw = repr(response)
        super().__init__(f"Unexpected file upload response: {raw}")
        self.response = response


class ConfigurationError(ModusignError):
    """Required process-level configuration is missing."""

    code = ErrorCode.CONFIGURATION


# ─────────────────────────────────────────────────────────────────────────────
# Tool-facing rendering
# ─────────────────────────────────────────────────────────────────────────────


class ToolError(BaseModel):
    """Structured error response for tool failures.

    Attributes:
        tool_name: Name of the tool that failed
        message: Human-readable error message
        code: Machine-readable error code
        status_code: Remote HTTP status, when the failure came from the service
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Tool Error",
            "examples": [{
                "tool_name": "document_get",
                "message": "Not Found - Resource does not exist: document not found",
                "code": "NOT_FOUND",
                "status_code": 404,
            }],
        },
    )

    tool_name: Annotated[str, Field(min_length=1)]
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.REMOTE_ERROR
    status_code: int | None = None

    @computed_field
    @property
    def is_auth_error(self) -> bool:
        """Whether the failure points at credentials rather than the request."""
        return self.code in _AUTH_CODES

    @classmethod
    def from_exception(cls, tool_name: str, exc: ModusignError) -> Self:
        return cls(
            tool_name=tool_name,
            message=exc.message or type(exc).__name__,
            code=exc.code,
            status_code=getattr(exc, "status_code", None),
        )

    def render(self) -> str:
        """Format error for LLM consumption."""
        parts = [f"**Tool Error ({self.tool_name}):** {self.message}"]
        if self.is_auth_error:
            parts.append(f"\n\n{CREDENTIALS_GUIDANCE}")
        return "".join(parts)

    __str__ = render


class ToolException(Exception):
    """Exception wrapping a ToolError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: ToolError) -> None:
        self.error = error
        super().__init__(error.message)
