"""Data models for the retrieval pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from src.pipeline_config import SearchSource

AccessScope = frozenset[str]


class EntityType(StrEnum):
    """Kind of record a fragment was retrieved from."""

    MEETING = "meeting"
    TRANSCRIPT = "transcript"
    TASK = "task"
    ACTION_ITEM = "actionItem"
    DOCUMENT = "document"


class DocumentSource(StrEnum):
    """Origin system of a document."""

    MEETING_MIND = "meeting-mind"
    SCHEDULE_MANAGER = "schedule-manager"


@dataclass(frozen=True)
class ContentFragment:
    """A unit of retrievable text with provenance metadata."""

    content: str
    entity_id: str | None
    entity_type: EntityType
    similarity: float | None = None
    title: str | None = None
    entity_date: datetime | date | None = None
    speaker: str | None = None
    source: DocumentSource | None = None
    category: str | None = None
    file_name: str | None = None


@dataclass(frozen=True)
class ActionItem:
    """An action item joined with its converted task and project, if any."""

    id: str
    title: str
    status: str
    meeting_id: str
    meeting_title: str | None = None
    meeting_date: datetime | date | None = None
    description: str | None = None
    priority: str | None = None
    assignee_name: str | None = None
    assignee_email: str | None = None
    due_date: datetime | date | None = None
    converted_to_type: str | None = None  # "task", "issue", or None
    converted_to_id: str | None = None
    task_status: str | None = None
    task_due_date: datetime | date | None = None
    project_id: str | None = None
    project_name: str | None = None

    @property
    def effective_status(self) -> str:
        """Linked task status when present, otherwise the item's own status."""
        return self.task_status or self.status

    @property
    def is_done(self) -> bool:
        if self.task_status:
            return self.task_status == "DONE"
        return self.status == "done"


@dataclass(frozen=True)
class DocumentRecord:
    """A document hit from either origin system."""

    id: str
    title: str
    source: DocumentSource
    file_name: str | None = None
    file_type: str | None = None
    extracted_text: str | None = None
    summary: str | None = None
    category: str | None = None
    created_at: datetime | date | None = None
    matched_content: str | None = None
    similarity: float | None = None


@dataclass(frozen=True)
class IntentFlags:
    """Independent per-source intent booleans for a message."""

    task: bool = False
    document: bool = False


@dataclass(frozen=True)
class SearchQuery:
    """Immutable retrieval input."""

    text: str
    meeting_id: str | None = None
    project_id: str | None = None
    search_source: SearchSource | None = None


@dataclass(frozen=True)
class ResultCounts:
    meeting_count: int = 0
    document_count: int = 0
    task_count: int = 0


@dataclass
class RetrievalResult:
    """Output of one retrieval run, handed to the generation step."""

    fragments: list[ContentFragment] = field(default_factory=list)
    action_items: list[ActionItem] = field(default_factory=list)
    documents: list[DocumentRecord] = field(default_factory=list)
    context_text: str | None = None
    counts: ResultCounts = field(default_factory=ResultCounts)

    @property
    def found(self) -> bool:
        return self.context_text is not None
