"""Shared parameter shapes for document and template operations."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from modusign_mcp.foundation.core import ToolParams

DocumentStatus = Literal[
    "DRAFT",
    "SCHEDULED",
    "ON_GOING",
    "ON_PROCESSING",
    "PROCESSING_FAILED",
    "ABORTED",
    "COMPLETED",
]

Locale = Literal["ko", "en", "zh-CN", "ja", "vi"]

SigningDuration = Annotated[int, Field(
    ge=60, le=525600,
    description="Signing validity in minutes. Default: 20160 (14 days). Max: 525600 (365 days)",
)]
Offset = Annotated[int, Field(ge=0, description="Number of items to skip (default: 0)")]
Limit = Annotated[int, Field(ge=1, le=100, description="Items per page (default: 10, max: 100)")]
LabelIds = Annotated[list[str], Field(max_length=5, description="Label IDs to attach (max 5)")]


class SigningMethod(ToolParams):
    type: Literal["EMAIL", "KAKAO", "SECURE_LINK"] = Field(
        description="Notification/signing method. EMAIL: email notification, "
        "KAKAO: KakaoTalk, SECURE_LINK: direct secure URL",
    )
    value: str = Field(
        description="Email address for EMAIL, Kakao user ID for KAKAO, or email/phone number for SECURE_LINK (cannot be empty)",
    )


class Participant(ToolParams):
    type: Literal["SIGNER", "VIEWER"] = Field(description="SIGNER: signs the document, VIEWER: view only")
    role: str = Field(min_length=1, max_length=36, description="Role name, unique per document")
    name: str = Field(min_length=2, max_length=30, description="Participant name (2-30 chars)")
    signing_order: int = Field(
        ge=1, le=30,
        description="Signing order. Use 1 for all participants for simultaneous signing, "
        "or 1,2,3... for sequential",
    )
    signing_method: SigningMethod
    signing_duration: SigningDuration | None = None
    requester_message: str | None = Field(default=None, max_length=1000, description="Message to the signer")
    locale: Locale | None = Field(default=None, description="Signer UI language. Default: ko")


class Metadata(ToolParams):
    key: str = Field(min_length=1, max_length=40, description="Metadata key (1-40 chars)")
    value: str = Field(max_length=80, description="Metadata value (max 80 chars)")


class TemplateParticipantMapping(ToolParams):
    role: str = Field(description="Role name - must match template role exactly")
    name: str = Field(min_length=2, max_length=30, description="Participant name")
    signing_method: SigningMethod
    signing_duration: SigningDuration | None = None
    requester_message: str | None = Field(default=None, max_length=1000)
    locale: Locale | None = None
    excluded: bool | None = Field(default=None, description="Set true to exclude this participant from signing")


class RequesterInputMapping(ToolParams):
    data_label: str = Field(description="Template input field label")
    value: str = Field(description="Value to fill in")


class TemplateDocument(ToolParams):
    title: str = Field(min_length=1, max_length=100, description="Document title (1-100 chars)")
    participant_mappings: list[TemplateParticipantMapping] = Field(
        description="Map template roles to actual signers",
    )
    requester_input_mappings: list[RequesterInputMapping] | None = Field(
        default=None, description="Pre-fill requester input fields defined in the template",
    )
    metadatas: list[Metadata] | None = Field(default=None, max_length=10)
    label_ids: LabelIds | None = None


class Contact(ToolParams):
    type: Literal["EMAIL", "PHONE"] = Field(description="Contact type")
    value: str = Field(description="Email address or phone number")


class PageParams(ToolParams):
    offset: Offset | None = None
    limit: Limit | None = None


class DocumentIdParams(ToolParams):
    document_id: str = Field(min_length=1, description="Document ID")
