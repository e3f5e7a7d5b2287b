"""Shared fixtures: a scripted httpx transport and a recording sleep."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from modusign_mcp.client import ModusignClient
from modusign_mcp.files import FileRefResolver
from modusign_mcp.runtime.observability import configure_logging

BASE_URL = "https://api.test.modusign"


class ScriptedTransport:
    """Answers requests from a queue of responses (or a handler) and records each request."""

    def __init__(self, *responses: httpx.Response, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        self.responses = list(responses)
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return self.responses.pop(0)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class SleepRecorder:
    """Stand-in for asyncio.sleep that returns immediately and remembers delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def json_response(status: int, body: Any, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status, json=body, headers=headers)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


def make_client(transport: ScriptedTransport, sleep: SleepRecorder | None = None, **kwargs: Any) -> ModusignClient:
    return ModusignClient(
        "me@example.com",
        "secret-key",
        BASE_URL,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
        sleep=sleep or SleepRecorder(),
        **kwargs,
    )


@pytest.fixture(autouse=True)
def silent_logs() -> Iterator[None]:
    """Silence structured logs for every test."""
    configure_logging("none")
    yield


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


class FakeUploadTransport(ScriptedTransport):
    """Answers POST /files with sequential refs (f1/t1, f2/t2, ...) and everything else with ``{}``."""

    def __init__(self, fail_names: set[str] | None = None) -> None:
        super().__init__(handler=self._handle)
        self.fail_names = fail_names or set()
        self.uploads: list[tuple[str, bytes, str]] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.path != "/files":
            return json_response(200, {"id": "doc-1"})
        name, content, upload_type = parse_upload(request)
        if name in self.fail_names:
            return json_response(400, {"message": f"bad file {name}"})
        self.uploads.append((name, content, upload_type))
        n = len(self.uploads)
        return json_response(200, {"fileId": f"f{n}", "token": f"t{n}"})


def parse_upload(request: httpx.Request) -> tuple[str, bytes, str]:
    """(file name, file bytes, type field) from a multipart upload request."""
    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=")[1].encode()
    name, content, upload_type = "", b"", ""
    for part in request.content.split(b"--" + boundary):
        head, sep, body = part.partition(b"\r\n\r\n")
        if not sep:
            continue
        body = body.removesuffix(b"\r\n")
        if b'name="file"' in head:
            name = head.split(b'filename="')[1].split(b'"')[0].decode()
            content = body
        elif b'name="type"' in head:
            upload_type = body.decode()
    return name, content, upload_type


@pytest.fixture
def uploads() -> FakeUploadTransport:
    return FakeUploadTransport()


@pytest.fixture
def resolver(uploads: FakeUploadTransport) -> FileRefResolver:
    return FileRefResolver(make_client(uploads))
