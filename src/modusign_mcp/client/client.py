"""Authenticated request executor for the Modusign REST API.

One call = one logical request: the auth header is always attached, 429s are
retried per the throttle policy, any other non-2xx final status raises
ModusignApiError, and success bodies decode to JSON (or ``{}`` for 204 and
non-JSON responses). Transport failures propagate as httpx exceptions.

Example:
    >>> async with ModusignClient("me@example.com", "api-key") as client:
    ...     docs = await client.get("/documents", {"offset": 0, "limit": 10})
    ...     ref = await client.post_form("/files", MultipartForm(
    ...         files={"file": ("a.pdf", b"%PDF-")}, data={"type": "document"},
    ...     ))
"""

from __future__ import annotations

import asyncio
import json as jsonlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

import httpx

from modusign_mcp.foundation.config import DEFAULT_BASE_URL
from modusign_mcp.foundation.errors import ModusignApiError
from modusign_mcp.runtime.observability import get_logger

from .auth import BasicAuth
from .query import QueryValue, encode_query_params
from .retry import DEFAULT_THROTTLE, Sleep, ThrottlePolicy, send_with_throttle

if TYPE_CHECKING:
    from types import TracebackType

    from modusign_mcp.foundation.config import ModusignSettings

log = get_logger("modusign_mcp.client")

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "modusign-mcp/1.0"

FileField = tuple[str, bytes] | tuple[str, bytes, str]


@dataclass(slots=True, frozen=True)
class MultipartForm:
    """Raw multipart payload. The transport sets the content type and boundary.

    Attributes:
        files: Field name -> (file name, bytes[, content type])
        data: Plain form fields
    """

    files: Mapping[str, FileField]
    data: Mapping[str, str] = field(default_factory=dict)


class ModusignClient:
    """Async client for the Modusign API.

    Args:
        email: Account email (Basic auth identity)
        api_key: API key (Basic auth secret)
        base_url: Service address; defaults to the public endpoint
        timeout: Per-request timeout in seconds
        throttle: Retry policy for 429 responses
        http_client: Externally owned httpx client (not closed by aclose)
        sleep: Suspension used between throttled attempts
        user_agent: User-Agent header value
    """

    __slots__ = ("_auth", "_base_url", "_http", "_owns_http", "_throttle", "_sleep", "_user_agent")

    def __init__(
        self,
        email: str,
        api_key: str,
        base_url: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        throttle: ThrottlePolicy = DEFAULT_THROTTLE,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._auth = BasicAuth(username=email, password=api_key)
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._throttle = throttle
        self._sleep = sleep
        self._user_agent = user_agent

    @classmethod
    def from_settings(cls, settings: ModusignSettings, **kwargs: Any) -> Self:
        """Build a client from settings; raises ConfigurationError when credentials are missing."""
        email, api_key = settings.require_credentials()
        throttle = ThrottlePolicy(
            max_retries=settings.retry.max_retries,
            default_delay=settings.retry.default_delay,
        )
        return cls(
            email,
            api_key,
            settings.base_url,
            timeout=settings.http.timeout,
            throttle=throttle,
            user_agent=settings.http.user_agent,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def throttle(self) -> ThrottlePolicy:
        return self._throttle

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────────
    # Verbs
    # ─────────────────────────────────────────────────────────────────

    async def get(self, path: str, params: Mapping[str, QueryValue] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, json=body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, json=body)

    async def delete(self, path: str, params: Mapping[str, QueryValue] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def post_form(self, path: str, form: MultipartForm) -> Any:
        return await self.request("POST", path, form=form)

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    def url_for(self, path: str) -> str:
        """Absolute URL for a path under the base address."""
        return f"{self._base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, QueryValue] | None = None,
        json: Any = None,
        form: MultipartForm | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Issue one logical request and decode its result.

        Args:
            method: HTTP method
            path: Path under the base address ("/documents/abc")
            params: Query parameters; None values are dropped
            json: Body serialized as JSON (mutually exclusive with form)
            form: Multipart body (mutually exclusive with json)
            headers: Extra headers; cannot replace Authorization

        Returns:
            Decoded JSON, or ``{}`` for 204 and non-JSON responses

        Raises:
            ModusignApiError: Final response outside 2xx (including a 429
                that outlived the retry budget)
            ValueError: Both json and form were given
        """
        if json is not None and form is not None:
            raise ValueError("json and form bodies are mutually exclusive")

        url = self.url_for(path)
        query = encode_query_params(params)
        request_headers = {"User-Agent": self._user_agent, "Accept": "application/json"}
        request_headers.update((k, v) for k, v in (headers or {}).items() if k.lower() != "authorization")
        content: bytes | None = None
        if json is not None:
            content = jsonlib.dumps(json, ensure_ascii=False).encode()
            request_headers["Content-Type"] = "application/json"
        self._auth.apply(request_headers)

        async def send() -> httpx.Response:
            if form is not None:
                return await self._http.request(
                    method, url, params=query, headers=request_headers,
                    files=dict(form.files), data=dict(form.data),
                )
            return await self._http.request(method, url, params=query, headers=request_headers, content=content)

        label = f"{method} {path}"
        response = await send_with_throttle(send, self._throttle, sleep=self._sleep, label=label)
        log.debug("request completed", method=method, path=path, status=response.status_code)

        if not response.is_success:
            log.warning("request failed", method=method, path=path, status=response.status_code)
            raise ModusignApiError(response.status_code, _error_body(response))
        return _decode_success(response)


def _error_body(response: httpx.Response) -> Any:
    """Error payload as JSON when it parses, else the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _decode_success(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if response.status_code == 204 or "application/json" not in content_type:
        return {}
    return response.json()
