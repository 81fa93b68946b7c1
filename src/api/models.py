"""Pydantic request/response schemas for the meeting chat API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from src.pipeline_config import SearchSource


class RetrieveRequest(BaseModel):
    """Request body for the /api/retrieve endpoint."""

    query: str
    meeting_id: str | None = None
    project_id: str | None = None
    search_source: SearchSource | None = None


class FragmentOut(BaseModel):
    """A single retrieved fragment with provenance."""

    content: str
    entity_id: str | None = None
    entity_type: str
    similarity: float | None = None
    title: str | None = None
    entity_date: datetime | date | None = None
    speaker: str | None = None
    source: str | None = None
    category: str | None = None
    file_name: str | None = None


class Counts(BaseModel):
    meeting_count: int = 0
    document_count: int = 0
    task_count: int = 0


class RetrieveResponse(BaseModel):
    """Response body for the /api/retrieve endpoint."""

    found: bool
    fragments: list[FragmentOut]
    context_text: str
    counts: Counts


class ChatRequest(BaseModel):
    """Request body for the /api/chat endpoint."""

    message: str
    meeting_id: str | None = None
    project_id: str | None = None
    session_id: str | None = None
    search_source: SearchSource | None = None


class SourceOut(BaseModel):
    title: str
    content: str


class ChatResponse(BaseModel):
    """Response body for the /api/chat endpoint."""

    response: str
    session_id: str
    sources: list[SourceOut] = []
    suggestions: list[str] = []
    counts: Counts = Counts()
    model: str | None = None
    usage: dict[str, Any] | None = None


class ActionItemOut(BaseModel):
    id: str
    title: str
    status: str
    effective_status: str
    meeting_id: str
    meeting_title: str | None = None
    assignee_name: str | None = None
    due_date: datetime | date | None = None
    converted_to_type: str | None = None
    task_status: str | None = None
    project_name: str | None = None


class ActionItemsResponse(BaseModel):
    """Response body for GET /api/action-items."""

    items: list[ActionItemOut] = []
    stats: dict[str, int] = {}
    count: int = 0
    markdown: str | None = None


class DocumentSearchResponse(BaseModel):
    """Response body for GET /api/documents/search."""

    query: str
    total: int
    results: list[dict[str, Any]]


class MeetingSummary(BaseModel):
    """Summary representation of an accessible meeting."""

    id: str
    title: str
    created_at: str | None = None


class ProjectSummary(BaseModel):
    """A project the caller owns or is a member of."""

    id: str
    name: str
    color: str | None = None
    created_at: str | None = None


class SessionCreateRequest(BaseModel):
    meeting_id: str | None = None
    project_id: str | None = None


class SessionSummary(BaseModel):
    id: str
    title: str
    meeting_id: str | None = None
    project_id: str | None = None
    created_at: str | None = None
    last_message_at: str | None = None


class MessageOut(BaseModel):
    role: str
    content: str


class SessionDetail(BaseModel):
    session: dict[str, Any]
    messages: list[MessageOut]
