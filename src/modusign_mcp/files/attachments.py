"""Requester attachment list normalization."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from modusign_mcp.foundation.errors import FileInputError
from modusign_mcp.runtime.concurrency import gather_all

from .models import REQUESTER_ATTACHMENT, AttachmentFile, Base64FileInput, FilePathInput, FileRefInput
from .resolver import AnyFileInput, FileRefResolver

ATTACHMENT_PREFIX = "requester-attachment"

Attachment = AttachmentFile | AnyFileInput


def _coerce(entry: Attachment | Mapping[str, Any]) -> Attachment:
    if isinstance(entry, AttachmentFile | FilePathInput | Base64FileInput | FileRefInput):
        return entry
    try:
        return REQUESTER_ATTACHMENT.validate_python(entry)
    except ValidationError as exc:
        raise FileInputError(f"Invalid requester attachment: {exc}") from exc


async def _normalize_one(resolver: FileRefResolver, index: int, entry: Attachment) -> dict[str, Any]:
    fallback = f"{ATTACHMENT_PREFIX}-{index}"
    if isinstance(entry, AttachmentFile):
        ref = await resolver.resolve(entry.file, "attachment", fallback)
        return {**entry.model_dump(by_alias=True), "file": ref.to_wire()}
    return (await resolver.resolve(entry, "attachment", fallback)).to_wire()


async def normalize_attachments(
    resolver: FileRefResolver,
    entries: Sequence[Attachment | Mapping[str, Any]] | None,
) -> list[dict[str, Any]] | None:
    """Resolve every attachment concurrently, keeping order and sibling fields.

    Entries wrapped as ``{"file": ..., **meta}`` come back as ``{"file": ref, **meta}``;
    bare inputs come back as the ref itself. Each entry's fallback name is
    ``requester-attachment-<n>`` (1-based). Any failure fails the whole list.

    Returns:
        Normalized entries in input order, or None when there are none
    """
    if not entries:
        return None
    coerced = [_coerce(entry) for entry in entries]
    return await gather_all(*(_normalize_one(resolver, i, entry) for i, entry in enumerate(coerced, start=1)))
