"""Signing document tools: listing, creation (direct, template, embedded) and lifecycle actions."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

import orjson
from pydantic import Field

from modusign_mcp.client import build_odata_filter
from modusign_mcp.files import FileInput, FileRef, RequesterAttachment, normalize_attachments
from modusign_mcp.foundation.core import ModusignTool, ToolMetadata, ToolParams, compact, segment
from modusign_mcp.runtime.concurrency import gather_all

from .schemas import (
    Contact,
    DocumentIdParams,
    DocumentStatus,
    LabelIds,
    Limit,
    Metadata,
    Offset,
    Participant,
    TemplateDocument,
)

CATEGORY = "documents"

RedirectUrl = Annotated[str, Field(
    pattern=r"^https?://\S+$",
    description="Optional redirect URL after embedded flow completes",
)]
Attachments = Annotated[list[RequesterAttachment], Field(
    description="Requester attachments. Each item is a file input, or {file, ...metadata}; "
    "every file is uploaded as needed and sent as a FILE_REF.",
)]


def _doc_path(document_id: str, *rest: str) -> str:
    return "/".join(("/documents", segment(document_id), *rest))


def _with_file_ref(result: Any, ref: FileRef) -> dict[str, Any]:
    base = result if isinstance(result, dict) else {}
    return {**base, "uploadedFileRef": ref.to_wire()}


# ─────────────────────────────────────────────────────────────────────────────
# Parameters
# ─────────────────────────────────────────────────────────────────────────────


class DocumentListParams(ToolParams):
    offset: Offset | None = None
    limit: Limit | None = None
    status: DocumentStatus | None = Field(default=None, description="Filter by document status")
    title_contains: str | None = Field(default=None, description="Filter by title keyword (partial match)")
    created_at_from: str | None = Field(
        default=None,
        description="Filter: created after this ISO 8601 datetime (e.g. 2024-01-01T00:00:00+09:00)",
    )
    created_at_to: str | None = Field(default=None, description="Filter: created before this ISO 8601 datetime")
    label_ids: list[str] | None = Field(default=None, description="Filter by label IDs")
    metadatas: dict[str, str] | None = Field(
        default=None,
        description='Filter by metadata key-value pairs as JSON object (e.g. {"담당자":"김모두"})',
    )
    order_by: str | None = Field(
        default=None,
        description='Sort order. Fields: createdAt, updatedAt, title. Directions: asc, desc. Default: "updatedAt desc"',
    )

    def query(self) -> dict[str, str | int | None]:
        query: dict[str, str | int | None] = {
            "offset": self.offset,
            "limit": self.limit,
            "filter": build_odata_filter(
                status=self.status,
                title_contains=self.title_contains,
                created_at_from=self.created_at_from,
                created_at_to=self.created_at_to,
                label_ids=self.label_ids,
            ),
            "orderBy": self.order_by,
        }
        if self.metadatas:
            query["metadatas"] = orjson.dumps(self.metadatas).decode()
        return query


class DocumentCreateParams(ToolParams):
    title: str = Field(min_length=1, max_length=100, description="Document title (1-100 chars)")
    file: FileInput = Field(description="Main document file (FILE_PATH recommended, BASE64 or FILE_REF)")
    requester_attachments: Attachments | None = None
    participants: list[Participant] = Field(min_length=1, description="Signing participants (at least 1)")
    metadatas: list[Metadata] | None = Field(
        default=None, max_length=10, description="Custom metadata key-value pairs (max 10)",
    )
    label_ids: LabelIds | None = None


class EmbeddedDraftParams(DocumentCreateParams):
    title: str = Field(min_length=1, max_length=100, description="Draft title")
    file: FileInput = Field(description="Main draft file (FILE_PATH, BASE64 or FILE_REF)")
    participants: list[Participant] = Field(min_length=1, description="Draft participants")
    redirect_url: RedirectUrl | None = None


class TemplateRequestParams(ToolParams):
    template_id: str = Field(min_length=1, description="Template ID (from template_list or template_get)")
    document: TemplateDocument


class EmbeddedTemplateParams(TemplateRequestParams):
    redirect_url: RedirectUrl | None = None


class CorrectionParams(DocumentIdParams):
    participant_id: str = Field(min_length=1, description="Participant ID to request correction from")
    message: str = Field(min_length=1, max_length=1000, description="Correction request message (1-1000 chars)")


class DueDateParams(DocumentIdParams):
    datetime: str = Field(description='New deadline in ISO 8601 format (e.g. "2025-03-31T12:00:00+09:00")')


class MetadataUpdateParams(DocumentIdParams):
    metadatas: list[Metadata] = Field(
        max_length=10, description="New metadata array (replaces all existing). Max 10 items.",
    )


class DocumentLabelParams(DocumentIdParams):
    label_id: str = Field(min_length=1, description="Label ID")


class ForwardParams(DocumentIdParams):
    document_id: str = Field(min_length=1, description="Document ID (must be COMPLETED status)")
    contacts: list[Contact] = Field(min_length=1, description="Recipients to forward the document to")
    message: str | None = Field(default=None, description="Optional message to include")


class ParticipantParams(DocumentIdParams):
    participant_id: str = Field(min_length=1, description="Participant ID")


# ─────────────────────────────────────────────────────────────────────────────
# Listing and creation
# ─────────────────────────────────────────────────────────────────────────────


class DocumentListTool(ModusignTool[DocumentListParams]):
    metadata = ToolMetadata(
        name="document_list",
        description="List signing documents with pagination, filtering (status, title, "
        "creation date range, labels, metadata) and sorting.",
        category=CATEGORY,
    )
    params_schema = DocumentListParams

    async def _async_run(self, params: DocumentListParams) -> Any:
        return await self.client.get("/documents", params.query())


class DocumentCreateTool(ModusignTool[DocumentCreateParams]):
    """Uploads the main file and attachments concurrently, then creates the request."""

    metadata = ToolMetadata(
        name="document_create",
        description="Create a new signing request. FILE_PATH and BASE64 files are uploaded "
        "via /files and sent as FILE_REF; the uploaded reference is returned as uploadedFileRef.",
        category=CATEGORY,
    )
    params_schema = DocumentCreateParams

    endpoint: ClassVar[str] = "/documents"
    fallback_name: ClassVar[str] = "document"

    async def _async_run(self, params: DocumentCreateParams) -> Any:
        file_ref, attachments = await gather_all(
            self.resolver.resolve(params.file, "document", self.fallback_name),
            normalize_attachments(self.resolver, params.requester_attachments),
        )
        body = compact({
            **params.wire(exclude={"file", "requester_attachments"}),
            "file": file_ref.to_wire(),
            "requesterAttachments": attachments,
        })
        result = await self.client.post(self.endpoint, body)
        return _with_file_ref(result, file_ref)


class DocumentCreateEmbeddedDraftTool(DocumentCreateTool):
    metadata = ToolMetadata(
        name="document_create_embedded_draft",
        description="Create an embedded draft and return its URL for iframe-based draft editing.",
        category=CATEGORY,
    )
    params_schema = EmbeddedDraftParams

    endpoint = "/embedded-drafts"
    fallback_name = "embedded-draft"


class DocumentCreateFromTemplateTool(ModusignTool[TemplateRequestParams]):
    metadata = ToolMetadata(
        name="document_create_from_template",
        description="Create a signing request from a pre-configured template. "
        "participantMappings roles must match the template's role names.",
        category=CATEGORY,
    )
    params_schema = TemplateRequestParams

    async def _async_run(self, params: TemplateRequestParams) -> Any:
        return await self.client.post("/documents/request-with-template", params.wire())


class DocumentCreateEmbeddedDraftFromTemplateTool(ModusignTool[EmbeddedTemplateParams]):
    metadata = ToolMetadata(
        name="document_create_embedded_draft_from_template",
        description="Create an embedded draft URL from a template.",
        category=CATEGORY,
    )
    params_schema = EmbeddedTemplateParams

    async def _async_run(self, params: EmbeddedTemplateParams) -> Any:
        return await self.client.post("/embedded-drafts/create-with-template", params.wire())


# ─────────────────────────────────────────────────────────────────────────────
# Lifecycle actions
# ─────────────────────────────────────────────────────────────────────────────


class DocumentCancelTool(ModusignTool[DocumentIdParams]):
    metadata = ToolMetadata(
        name="document_cancel",
        description="Cancel a pending signing request. Only works for documents in ON_GOING or SCHEDULED status.",
        category=CATEGORY,
    )
    params_schema = DocumentIdParams

    async def _async_run(self, params: DocumentIdParams) -> Any:
        return await self.client.post(_doc_path(params.document_id, "cancel"), {})


class DocumentRequestCorrectionTool(ModusignTool[CorrectionParams]):
    metadata = ToolMetadata(
        name="document_request_correction",
        description="Request a participant to correct their signed content.",
        category=CATEGORY,
    )
    params_schema = CorrectionParams

    async def _async_run(self, params: CorrectionParams) -> Any:
        body = {"participantId": params.participant_id, "message": params.message}
        return await self.client.post(_doc_path(params.document_id, "request-correction"), body)


class DocumentRemindTool(ModusignTool[DocumentIdParams]):
    metadata = ToolMetadata(
        name="document_remind",
        description="Resend the signing notification to all current-order participants.",
        category=CATEGORY,
    )
    params_schema = DocumentIdParams

    async def _async_run(self, params: DocumentIdParams) -> Any:
        return await self.client.post(_doc_path(params.document_id, "remind-signing"))


class DocumentChangeDueDateTool(ModusignTool[DueDateParams]):
    metadata = ToolMetadata(
        name="document_change_due_date",
        description="Change the signing deadline for current-order participants.",
        category=CATEGORY,
    )
    params_schema = DueDateParams

    async def _async_run(self, params: DueDateParams) -> Any:
        return await self.client.put(_doc_path(params.document_id, "change-signing-due"), {"datetime": params.datetime})


class DocumentUpdateMetadataTool(ModusignTool[MetadataUpdateParams]):
    metadata = ToolMetadata(
        name="document_update_metadata",
        description="Replace all metadata on a document. Pass an empty array to clear all metadata.",
        category=CATEGORY,
    )
    params_schema = MetadataUpdateParams

    async def _async_run(self, params: MetadataUpdateParams) -> Any:
        body = {"metadatas": [m.wire() for m in params.metadatas]}
        return await self.client.put(_doc_path(params.document_id, "metadatas"), body)


class DocumentAddLabelTool(ModusignTool[DocumentLabelParams]):
    metadata = ToolMetadata(name="document_add_label", description="Add a label to a document.", category=CATEGORY)
    params_schema = DocumentLabelParams

    async def _async_run(self, params: DocumentLabelParams) -> Any:
        return await self.client.post(_doc_path(params.document_id, "labels", segment(params.label_id)))


class DocumentRemoveLabelTool(ModusignTool[DocumentLabelParams]):
    metadata = ToolMetadata(
        name="document_remove_label", description="Remove a label from a document.", category=CATEGORY,
    )
    params_schema = DocumentLabelParams

    async def _async_run(self, params: DocumentLabelParams) -> Any:
        return await self.client.delete(_doc_path(params.document_id, "labels", segment(params.label_id)))


class DocumentForwardTool(ModusignTool[ForwardParams]):
    metadata = ToolMetadata(
        name="document_forward",
        description="Forward a completed document to external recipients via email or phone.",
        category=CATEGORY,
    )
    params_schema = ForwardParams

    async def _async_run(self, params: ForwardParams) -> Any:
        return await self.client.post(_doc_path(params.document_id, "forward"), params.wire(exclude={"document_id"}))


class DocumentGetSigningUrlTool(ModusignTool[ParticipantParams]):
    metadata = ToolMetadata(
        name="document_get_signing_url",
        description="Get a secure signing URL for a specific participant. Only works for participants "
        "registered with the SECURE_LINK signing method; EMAIL or KAKAO participants get a 422 error.",
        category=CATEGORY,
    )
    params_schema = ParticipantParams

    async def _async_run(self, params: ParticipantParams) -> Any:
        path = _doc_path(params.document_id, "participants", segment(params.participant_id), "embedded-view")
        return await self.client.get(path)


# ─────────────────────────────────────────────────────────────────────────────
# Reads keyed by document ID
# ─────────────────────────────────────────────────────────────────────────────


class _DocumentReadTool(ModusignTool[DocumentIdParams]):
    params_schema = DocumentIdParams
    suffix: ClassVar[tuple[str, ...]] = ()

    async def _async_run(self, params: DocumentIdParams) -> Any:
        return await self.client.get(_doc_path(params.document_id, *self.suffix))


class DocumentGetTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get",
        description="Get detailed information of a specific document including status, participants, and file URLs.",
        category=CATEGORY,
    )


class DocumentGetHistoryTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get_history",
        description="Get the audit history of a document (status changes, signing events, etc).",
        category=CATEGORY,
    )
    suffix = ("histories",)


class DocumentGetRequesterInputsTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get_requester_inputs",
        description="Get the requester's input field values for a document.",
        category=CATEGORY,
    )
    suffix = ("requester-inputs",)


class DocumentGetParticipantFieldsTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get_participant_fields",
        description="Get signer input field definitions for a document.",
        category=CATEGORY,
    )
    suffix = ("participant-fields",)


class DocumentGetAttachmentsTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get_attachments",
        description="Get attachments associated with a document.",
        category=CATEGORY,
    )
    suffix = ("attachments",)


class DocumentGetEmbeddedViewTool(_DocumentReadTool):
    metadata = ToolMetadata(
        name="document_get_embedded_view",
        description="Get an embedded document viewer URL for iframe integration.",
        category=CATEGORY,
    )
    suffix = ("embedded-view",)


DOCUMENT_TOOLS: tuple[type[ModusignTool[Any]], ...] = (
    DocumentListTool,
    DocumentGetTool,
    DocumentCreateTool,
    DocumentCreateFromTemplateTool,
    DocumentCreateEmbeddedDraftTool,
    DocumentCreateEmbeddedDraftFromTemplateTool,
    DocumentCancelTool,
    DocumentRequestCorrectionTool,
    DocumentRemindTool,
    DocumentChangeDueDateTool,
    DocumentUpdateMetadataTool,
    DocumentAddLabelTool,
    DocumentRemoveLabelTool,
    DocumentGetHistoryTool,
    DocumentGetRequesterInputsTool,
    DocumentGetParticipantFieldsTool,
    DocumentGetAttachmentsTool,
    DocumentForwardTool,
    DocumentGetEmbeddedViewTool,
    DocumentGetSigningUrlTool,
)
