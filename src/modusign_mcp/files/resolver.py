"""Resolve file inputs to canonical ``{fileId, token}`` references.

FILE_REF inputs pass through without a network call. FILE_PATH and BASE64
inputs are turned into bytes plus a file name and uploaded to ``/files`` as
multipart (fields ``file`` and ``type``). The upload response may be either
flat (``{fileId, token}``) or nested (``{file: {fileId, token}}``).

Example:
    >>> resolver = FileRefResolver(client)
    >>> ref = await resolver.resolve(
    ...     Base64FileInput(type="BASE64", base64="JVBERi0=", extension="pdf"),
    ...     "document",
    ...     "document",
    ... )  # uploads "document.pdf"
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError

from modusign_mcp.client import MultipartForm
from modusign_mcp.foundation.errors import FileInputError, UploadResponseError
from modusign_mcp.runtime.observability import get_logger

from .models import FILE_INPUT, Base64FileInput, FilePathInput, FileRef, FileRefInput, UploadType
from .readers import FileReader, build_file_reader

if TYPE_CHECKING:
    from modusign_mcp.client import ModusignClient

log = get_logger("modusign_mcp.files")

UPLOAD_PATH = "/files"
DEFAULT_EXTENSION = "pdf"

AnyFileInput = FilePathInput | Base64FileInput | FileRefInput


class _NestedUpload(BaseModel):
    model_config = ConfigDict(extra="ignore")
    file: FileRef


def parse_upload_ref(result: object) -> FileRef:
    """Extract the reference from an upload response, flat shape first.

    Raises:
        UploadResponseError: Neither shape matched; embeds the raw response
    """
    try:
        return FileRef.model_validate(result)
    except ValidationError:
        pass
    try:
        return _NestedUpload.model_validate(result).file
    except ValidationError as exc:
        raise UploadResponseError(result) from exc


def inline_file_name(file_input: Base64FileInput, fallback_base_name: str) -> str:
    """Explicit fileName, else ``<fallback>.<extension>`` with one leading dot stripped."""
    if file_input.file_name:
        return file_input.file_name
    extension = file_input.extension or DEFAULT_EXTENSION
    return f"{fallback_base_name}.{extension.removeprefix('.')}"


_URLSAFE = str.maketrans("-_", "+/")


def decode_base64(payload: str) -> bytes:
    """Lenient-alphabet, strict-content base64 decode.

    Whitespace is ignored, the URL-safe alphabet is accepted and missing
    trailing padding is restored; any other character is rejected.
    """
    normalized = "".join(payload.split()).translate(_URLSAFE)
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except binascii.Error as exc:
        raise FileInputError(f"Invalid base64 payload: {exc}") from exc


def coerce_file_input(file_input: AnyFileInput | Mapping[str, Any]) -> AnyFileInput:
    """Validate a raw mapping into a file input variant."""
    if isinstance(file_input, FilePathInput | Base64FileInput | FileRefInput):
        return file_input
    try:
        return FILE_INPUT.validate_python(file_input)
    except ValidationError as exc:
        raise FileInputError(f"Invalid file input: {exc}") from exc


class FileRefResolver:
    """Turns any file input into a FileRef, uploading through the client when needed.

    Args:
        client: Request executor used for uploads
        reader: Local file reader for FILE_PATH inputs (defaults to the
            filesystem reader with the shell fallback enabled)
    """

    __slots__ = ("_client", "_reader")

    def __init__(self, client: ModusignClient, reader: FileReader | None = None) -> None:
        self._client = client
        self._reader = reader or build_file_reader(shell_fallback=True)

    @property
    def client(self) -> ModusignClient:
        return self._client

    async def resolve(
        self,
        file_input: AnyFileInput | Mapping[str, Any],
        upload_type: UploadType,
        fallback_base_name: str,
    ) -> FileRef:
        """Resolve one input. Only FILE_PATH and BASE64 touch the network."""
        match coerce_file_input(file_input):
            case FileRefInput(value=ref):
                return ref
            case FilePathInput(file_path=path):
                content = await self._reader.read(path)
                return await self.upload(content, Path(path).name, upload_type)
            case Base64FileInput() as inline:
                file_name = inline_file_name(inline, fallback_base_name)
                return await self.upload(decode_base64(inline.base64), file_name, upload_type)

    async def upload(self, content: bytes, file_name: str, upload_type: UploadType) -> FileRef:
        """Upload raw bytes and return the parsed reference."""
        form = MultipartForm(files={"file": (file_name, content)}, data={"type": upload_type})
        result = await self._client.post_form(UPLOAD_PATH, form)
        ref = parse_upload_ref(result)
        log.info("file uploaded", fileName=file_name, uploadType=upload_type, size=len(content))
        return ref
