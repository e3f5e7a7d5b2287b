"""File tools: raw upload and PDF merge."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from modusign_mcp.client import MultipartForm
from modusign_mcp.files import FileRef, UploadType, decode_base64
from modusign_mcp.foundation.core import ModusignTool, ToolMetadata, ToolParams

CATEGORY = "files"


class FileUploadParams(ToolParams):
    file_base64: str = Field(description="Base64-encoded file content")
    file_name: str = Field(min_length=1, description='File name with extension (e.g. "contract.pdf")')
    type: UploadType = Field(
        description='File type. "document": main signing document (PDF up to 10MB, others up to 5MB). '
        '"attachment": supplementary file (up to 10MB)',
    )


class FileMergeParams(ToolParams):
    files: list[FileRef] = Field(min_length=2, description="Files to merge (at least 2). PDF only.")


class FileUploadTool(ModusignTool[FileUploadParams]):
    metadata = ToolMetadata(
        name="file_upload",
        description="Upload a file (base64 encoded) for use in document creation. Returns fileId + token "
        "valid for 2 hours. Supported formats: pdf, hwp, hwpx, doc, docx, xls, xlsx, ppt, pptx, "
        "bmp, gif, jpg, jpeg, png, tiff.",
        category=CATEGORY,
    )
    params_schema = FileUploadParams

    async def _async_run(self, params: FileUploadParams) -> Any:
        form = MultipartForm(
            files={"file": (params.file_name, decode_base64(params.file_base64))},
            data={"type": params.type},
        )
        return await self.client.post_form("/files", form)


class FileMergeTool(ModusignTool[FileMergeParams]):
    metadata = ToolMetadata(
        name="file_merge",
        description="Merge multiple uploaded PDF files into a single file. "
        "Use file_upload first to get fileId+token for each file.",
        category=CATEGORY,
    )
    params_schema = FileMergeParams

    async def _async_run(self, params: FileMergeParams) -> Any:
        return await self.client.post("/files/merge", {"files": [f.to_wire() for f in params.files]})


FILE_TOOLS: tuple[type[ModusignTool[Any]], ...] = (FileUploadTool, FileMergeTool)
