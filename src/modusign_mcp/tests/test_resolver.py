"""Tests for file input resolution, upload response parsing and local readers."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
from conftest import FakeUploadTransport, ScriptedTransport, json_response, make_client, parse_upload

from modusign_mcp.files import (
    Base64FileInput,
    FallbackFileReader,
    FilePathInput,
    FileRef,
    FileRefInput,
    FileRefResolver,
    LocalFileReader,
    ShellFileReader,
    build_file_reader,
    decode_base64,
    parse_upload_ref,
)
from modusign_mcp.foundation.errors import FileInputError, FileReadError, ModusignApiError, UploadResponseError

PDF = b"%PDF-1.4 test"
PDF_B64 = base64.b64encode(PDF).decode()


class StaticReader:
    """Reader double that returns fixed bytes or raises a fixed OSError."""

    def __init__(self, content: bytes | None = None, error: OSError | None = None) -> None:
        self.content = content
        self.error = error
        self.paths: list[str] = []

    async def read(self, path: str) -> bytes:
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        assert self.content is not None
        return self.content


# ─────────────────────────────────────────────────────────────────────────────
# Resolution
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_file_ref_passes_through_without_network(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    ref = await resolver.resolve(
        FileRefInput(type="FILE_REF", value=FileRef(file_id="f9", token="t9")), "document", "document",
    )
    assert ref == FileRef(file_id="f9", token="t9")
    assert uploads.requests == []


@pytest.mark.asyncio
async def test_inline_without_name_uses_fallback(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    ref = await resolver.resolve({"type": "BASE64", "base64": PDF_B64, "extension": "pdf"}, "document", "document")

    assert ref.to_wire() == {"fileId": "f1", "token": "t1"}
    assert uploads.uploads == [("document.pdf", PDF, "document")]


@pytest.mark.asyncio
async def test_inline_extension_leading_dot_stripped(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    await resolver.resolve(Base64FileInput(type="BASE64", base64=PDF_B64, extension=".docx"), "document", "contract")
    assert uploads.uploads[0][0] == "contract.docx"


@pytest.mark.asyncio
async def test_inline_explicit_name_wins(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    await resolver.resolve(
        Base64FileInput(type="BASE64", base64=PDF_B64, file_name="nda.pdf", extension="docx"), "attachment", "x",
    )
    assert uploads.uploads == [("nda.pdf", PDF, "attachment")]


@pytest.mark.asyncio
async def test_inline_whitespace_in_payload_ignored(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    wrapped = "\n".join(PDF_B64[i:i + 4] for i in range(0, len(PDF_B64), 4))
    await resolver.resolve(Base64FileInput(type="BASE64", base64=wrapped, extension="pdf"), "document", "document")
    assert uploads.uploads[0][1] == PDF


@pytest.mark.asyncio
async def test_inline_unpadded_payload_accepted(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    unpadded = base64.b64encode(b"%PDF-1.4 x").decode().rstrip("=")
    assert len(unpadded) % 4 != 0

    await resolver.resolve(Base64FileInput(type="BASE64", base64=unpadded, extension="pdf"), "document", "document")

    assert uploads.uploads == [("document.pdf", b"%PDF-1.4 x", "document")]


@pytest.mark.asyncio
async def test_inline_urlsafe_payload_accepted(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    content = b"\xfb\xff\xbf%PDF"
    urlsafe = base64.urlsafe_b64encode(content).decode()
    assert "-" in urlsafe and "_" in urlsafe

    await resolver.resolve(Base64FileInput(type="BASE64", base64=urlsafe, file_name="scan.pdf"), "document", "d")

    assert uploads.uploads == [("scan.pdf", content, "document")]


@pytest.mark.parametrize("payload", ["not base64!", "JVBE*i0=", "A"])
def test_decode_base64_rejects_garbage(payload: str) -> None:
    with pytest.raises(FileInputError, match="Invalid base64"):
        decode_base64(payload)


@pytest.mark.asyncio
async def test_invalid_base64_fails_before_upload(resolver: FileRefResolver, uploads: FakeUploadTransport) -> None:
    with pytest.raises(FileInputError, match="Invalid base64"):
        await resolver.resolve(Base64FileInput(type="BASE64", base64="not base64!", extension="pdf"), "document", "d")
    assert uploads.requests == []


@pytest.mark.asyncio
async def test_path_uploaded_under_its_base_name(
    resolver: FileRefResolver, uploads: FakeUploadTransport, tmp_path: Path,
) -> None:
    target = tmp_path / "계약서.pdf"
    target.write_bytes(PDF)

    await resolver.resolve(FilePathInput(type="FILE_PATH", file_path=str(target)), "document", "ignored")

    assert uploads.uploads == [("계약서.pdf", PDF, "document")]


@pytest.mark.asyncio
async def test_missing_path_raises_file_read_error(uploads: FakeUploadTransport, tmp_path: Path) -> None:
    resolver = FileRefResolver(make_client(uploads), build_file_reader(shell_fallback=False))
    missing = tmp_path / "missing.pdf"

    with pytest.raises(FileReadError) as exc_info:
        await resolver.resolve({"type": "FILE_PATH", "filePath": str(missing)}, "document", "document")

    assert exc_info.value.path == str(missing)
    assert "BASE64" in exc_info.value.message
    assert uploads.requests == []


@pytest.mark.asyncio
async def test_untyped_input_rejected(resolver: FileRefResolver) -> None:
    with pytest.raises(FileInputError):
        await resolver.resolve({"fileId": "f1", "token": "t1"}, "document", "document")


@pytest.mark.asyncio
async def test_upload_failure_propagates_api_error() -> None:
    transport = FakeUploadTransport(fail_names={"bad.pdf"})
    resolver = FileRefResolver(make_client(transport))

    with pytest.raises(ModusignApiError) as exc_info:
        await resolver.resolve(Base64FileInput(type="BASE64", base64=PDF_B64, file_name="bad.pdf"), "document", "d")

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_nested_upload_response_accepted() -> None:
    transport = ScriptedTransport(json_response(200, {"file": {"fileId": "f7", "token": "t7"}}))
    resolver = FileRefResolver(make_client(transport))

    ref = await resolver.upload(PDF, "a.pdf", "document")

    assert ref == FileRef(file_id="f7", token="t7")
    assert parse_upload(transport.last) == ("a.pdf", PDF, "document")
    assert transport.last.url.path == "/files"


# ─────────────────────────────────────────────────────────────────────────────
# Upload response parsing
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "response",
    [
        {"fileId": "f1", "token": "t1"},
        {"file": {"fileId": "f1", "token": "t1"}},
        {"fileId": "f1", "token": "t1", "file": {"fileId": "other", "token": "other"}},
    ],
    ids=["flat", "nested", "flat-wins"],
)
def test_parse_upload_ref_shapes(response: dict[str, object]) -> None:
    assert parse_upload_ref(response) == FileRef(file_id="f1", token="t1")


@pytest.mark.parametrize("response", [{}, {"fileId": "f1"}, {"file": {"token": "t1"}}, [], "ok"])
def test_parse_upload_ref_rejects_other_shapes(response: object) -> None:
    with pytest.raises(UploadResponseError) as exc_info:
        parse_upload_ref(response)
    assert exc_info.value.response == response
    assert exc_info.value.message.startswith("Unexpected file upload response: ")


# ─────────────────────────────────────────────────────────────────────────────
# Readers
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_local_reader_reads_bytes(tmp_path: Path) -> None:
    target = tmp_path / "a.bin"
    target.write_bytes(b"\x00\x01")
    assert await LocalFileReader().read(str(target)) == b"\x00\x01"


@pytest.mark.asyncio
async def test_fallback_reader_used_when_primary_fails() -> None:
    primary = StaticReader(error=PermissionError(1, "Operation not permitted"))
    secondary = StaticReader(content=PDF)

    assert await FallbackFileReader(primary, secondary).read("/sandboxed/a.pdf") == PDF
    assert primary.paths == secondary.paths == ["/sandboxed/a.pdf"]


@pytest.mark.asyncio
async def test_fallback_reader_reports_secondary_failure() -> None:
    reader = FallbackFileReader(
        StaticReader(error=PermissionError(1, "Operation not permitted")),
        StaticReader(error=OSError("cat exited with status 1: No such file")),
    )
    with pytest.raises(FileReadError, match="cat exited"):
        await reader.read("/nope.pdf")


@pytest.mark.asyncio
async def test_reader_without_fallback_reports_primary_failure() -> None:
    reader = FallbackFileReader(StaticReader(error=FileNotFoundError(2, "No such file or directory")))
    with pytest.raises(FileReadError, match="No such file or directory"):
        await reader.read("/nope.pdf")


@pytest.mark.asyncio
async def test_injected_reader_used_for_paths(uploads: FakeUploadTransport) -> None:
    reader = StaticReader(content=PDF)
    resolver = FileRefResolver(make_client(uploads), reader)

    await resolver.resolve({"type": "FILE_PATH", "filePath": "/Users/me/docs/contract.pdf"}, "document", "d")

    assert reader.paths == ["/Users/me/docs/contract.pdf"]
    assert uploads.uploads == [("contract.pdf", PDF, "document")]


@pytest.mark.asyncio
async def test_shell_reader_recovers_denied_path(tmp_path: Path) -> None:
    target = tmp_path / "sandboxed.pdf"
    target.write_bytes(PDF)
    reader = FallbackFileReader(StaticReader(error=PermissionError(1, "Operation not permitted")), ShellFileReader())

    assert await reader.read(str(target)) == PDF


@pytest.mark.asyncio
async def test_shell_reader_failure_raises_file_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.pdf"
    reader = FallbackFileReader(StaticReader(error=PermissionError(1, "Operation not permitted")), ShellFileReader())

    with pytest.raises(FileReadError, match="cat exited with status") as exc_info:
        await reader.read(str(missing))

    assert exc_info.value.path == str(missing)
