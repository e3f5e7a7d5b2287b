"""Throttle retry for the request executor.

Only HTTP 429 is retried. The delay comes from the response's retry-after
headers (whole seconds) and the loop is bounded by ``max_retries``; every
other status, and every transport failure, is returned or raised on the
first attempt.

Example:
    >>> policy = ThrottlePolicy(max_retries=3)
    >>> policy.delay_for(httpx.Headers({"X-Retry-After": "2"}))
    2.0
    >>> policy.delay_for(httpx.Headers({}))
    1.0
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Annotated

import httpx
from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, computed_field

from modusign_mcp.runtime.observability import get_logger

log = get_logger("modusign_mcp.retry")

Sleep = Callable[[float], Awaitable[None]]

# Leading integer, as a lenient integer parse reads it ("2", " 3s", "2.9" -> 2)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ThrottlePolicy(BaseModel):
    """Bounded delay-then-reissue policy for throttled (429) responses.

    Attributes:
        max_retries: Additional attempts after the first throttled response
        default_delay: Seconds to wait when no retry-after header parses
        retry_headers: Headers consulted in order; the first non-empty one wins
        retry_status: Status that triggers a retry
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        json_schema_extra={
            "title": "Throttle Policy",
            "examples": [{"max_retries": 3, "default_delay": 1.0}],
        },
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    default_delay: NonNegativeFloat = 1.0
    retry_headers: tuple[str, ...] = ("X-Retry-After", "Retry-After")
    retry_status: int = 429

    @computed_field
    @property
    def is_disabled(self) -> bool:
        return self.max_retries == 0

    def should_retry(self, status_code: int, remaining: int) -> bool:
        return status_code == self.retry_status and remaining > 0

    def delay_for(self, headers: Mapping[str, str]) -> float:
        """Seconds to wait before reissuing, read from the response headers."""
        raw = next((value for name in self.retry_headers if (value := headers.get(name))), None)
        if raw is None:
            return self.default_delay
        if (match := _LEADING_INT.match(raw)) is None:
            return self.default_delay
        return float(max(int(match.group(1)), 0))


DEFAULT_THROTTLE = ThrottlePolicy()


async def send_with_throttle(
    send: Callable[[], Awaitable[httpx.Response]],
    policy: ThrottlePolicy,
    *,
    sleep: Sleep = asyncio.sleep,
    label: str = "",
) -> httpx.Response:
    """Issue ``send`` and reissue it while the policy says the response is throttled.

    Args:
        send: Zero-argument coroutine factory issuing the identical request
        policy: Throttle policy
        sleep: Suspension used between attempts (injectable for tests)
        label: Request description for logs ("GET /documents")

    Returns:
        The first non-throttled response, or the last throttled one once
        the retry budget is spent.
    """
    remaining = policy.max_retries
    response = await send()
    while policy.should_retry(response.status_code, remaining):
        delay = policy.delay_for(response.headers)
        remaining -= 1
        log.warning("throttled, retrying", request=label, delay=delay, remaining=remaining)
        await response.aclose()
        await sleep(delay)
        response = await send()
    return response
