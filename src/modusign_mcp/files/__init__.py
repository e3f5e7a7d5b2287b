"""File inputs, local readers, upload resolution and attachment normalization."""

from .attachments import normalize_attachments
from .models import (
    FILE_INPUT,
    REQUESTER_ATTACHMENT,
    AttachmentFile,
    Base64FileInput,
    FileInput,
    FilePathInput,
    FileRef,
    FileRefInput,
    RequesterAttachment,
    UploadType,
)
from .readers import FallbackFileReader, FileReader, LocalFileReader, ShellFileReader, build_file_reader
from .resolver import FileRefResolver, decode_base64, inline_file_name, parse_upload_ref

__all__ = [
    "FILE_INPUT",
    "REQUESTER_ATTACHMENT",
    "AttachmentFile",
    "Base64FileInput",
    "FallbackFileReader",
    "FileInput",
    "FilePathInput",
    "FileReader",
    "FileRef",
    "FileRefInput",
    "FileRefResolver",
    "LocalFileReader",
    "RequesterAttachment",
    "ShellFileReader",
    "UploadType",
    "build_file_reader",
    "decode_base64",
    "inline_file_name",
    "normalize_attachments",
    "parse_upload_ref",
]
