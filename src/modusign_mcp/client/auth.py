"""Credentials for the remote service."""

from __future__ import annotations

import base64
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, SecretStr, field_serializer


class BasicAuth(BaseModel):
    """HTTP Basic authentication from an account email and an API key.

    The header value is encoded once at construction and never changes for the
    lifetime of the instance.

    Example:
        >>> auth = BasicAuth(username="me@example.com", password="key")
        >>> auth.apply({})["Authorization"].startswith("Basic ")
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    username: Annotated[str, Field(min_length=1)]
    password: SecretStr

    _header: str = PrivateAttr(default="")

    def model_post_init(self, __context: object) -> None:
        credentials = base64.b64encode(
            f"{self.username}:{self.password.get_secret_value()}".encode()
        ).decode()
        self._header = f"Basic {credentials}"

    @property
    def header_value(self) -> str:
        return self._header

    def apply(self, headers: dict[str, str]) -> dict[str, str]:
        headers["Authorization"] = self._header
        return headers

    @field_serializer("password", when_used="json")
    def _mask_password(self, v: SecretStr) -> str:
        """Mask password in JSON serialization."""
        return "***"

    def __hash__(self) -> int:
        return hash(self.username)
