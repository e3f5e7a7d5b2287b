"""File input shapes and the canonical file reference.

Every file-accepting operation takes a ``FileInput``: a tagged union whose
``type`` field is required. Inputs with a missing or unknown ``type``, or with
fields belonging to another variant, fail validation instead of being guessed.

Example:
    >>> FILE_INPUT.validate_python({"type": "FILE_REF", "value": {"fileId": "f1", "token": "t1"}})
    FileRefInput(type='FILE_REF', value=FileRef(file_id='f1', token='t1'))
    >>> FILE_INPUT.validate_python({"type": "FILE_PATH", "filePath": "/tmp/contract.pdf"}).file_path
    '/tmp/contract.pdf'
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    model_validator,
)

UploadType = Literal["document", "attachment"]


class FileRef(BaseModel):
    """Canonical ``{fileId, token}`` pair accepted wherever the service needs a file.

    Tokens are short-lived on the remote side; they are passed through untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    file_id: str = Field(alias="fileId", description="File ID returned by file_upload")
    token: str = Field(description="File token returned by file_upload")

    def to_wire(self) -> dict[str, str]:
        return {"fileId": self.file_id, "token": self.token}


_VARIANT_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class FilePathInput(BaseModel):
    """A local file, read and uploaded at resolution time."""

    model_config = _VARIANT_CONFIG

    type: Literal["FILE_PATH"] = Field(description="File input mode: FILE_PATH")
    file_path: Annotated[str, Field(
        alias="filePath",
        min_length=1,
        description="Absolute local file path to upload (e.g. /Users/you/contract.pdf)",
    )]


class Base64FileInput(BaseModel):
    """Inline base64 bytes, decoded and uploaded at resolution time."""

    model_config = _VARIANT_CONFIG

    type: Literal["BASE64"] = Field(description="File input mode: BASE64")
    base64: str = Field(description="Base64-encoded file content")
    file_name: str | None = Field(
        default=None, alias="fileName", description='File name with extension (e.g. "contract.pdf")',
    )
    extension: str | None = Field(
        default=None, description='Extension used when fileName is omitted (e.g. "pdf")',
    )

    @model_validator(mode="after")
    def _require_name_or_extension(self) -> Self:
        if not self.file_name and not self.extension:
            raise ValueError("BASE64 file input requires either fileName or extension")
        return self


class FileRefInput(BaseModel):
    """An already uploaded file; resolved without any network call."""

    model_config = _VARIANT_CONFIG

    type: Literal["FILE_REF"] = Field(description="File input mode: FILE_REF")
    value: FileRef


FileInput = Annotated[
    FilePathInput | Base64FileInput | FileRefInput,
    Field(discriminator="type", description="FILE_PATH (preferred), BASE64 or FILE_REF file input"),
]


class AttachmentFile(BaseModel):
    """A file input wrapped with sibling metadata that is sent back unchanged."""

    model_config = ConfigDict(frozen=True, extra="allow")

    file: FileInput


def _attachment_discriminator(v: Any) -> str:
    if isinstance(v, dict):
        return "wrapped" if "file" in v else "bare"
    return "wrapped" if isinstance(v, AttachmentFile) else "bare"


RequesterAttachment = Annotated[
    Annotated[AttachmentFile, Tag("wrapped")] | Annotated[FileInput, Tag("bare")],
    Discriminator(_attachment_discriminator),
]

FILE_INPUT: TypeAdapter[FilePathInput | Base64FileInput | FileRefInput] = TypeAdapter(FileInput)
REQUESTER_ATTACHMENT: TypeAdapter[AttachmentFile | FilePathInput | Base64FileInput | FileRefInput] = TypeAdapter(
    RequesterAttachment
)
