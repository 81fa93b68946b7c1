"""Merge retrieved fragments from every source into one context block."""

from __future__ import annotations

from src.retrieval.action_items import format_action_items_for_context
from src.retrieval.documents import format_documents_for_context
from src.retrieval.formatting import format_local_date
from src.retrieval.models import ActionItem, ContentFragment, DocumentRecord

NO_RESULTS_MESSAGE = (
    "I couldn't find any related meeting content. Try asking with different keywords."
)


def format_transcripts(fragments: list[ContentFragment]) -> str:
    """Group transcript fragments by meeting, keeping retrieval order within each group."""
    if not fragments:
        return ""

    groups: dict[str, list[ContentFragment]] = {}
    for fragment in fragments:
        groups.setdefault(fragment.entity_id or "unknown", []).append(fragment)

    parts: list[str] = ["## 🗣️ Meeting transcripts\n"]
    for chunks in groups.values():
        first = chunks[0]
        title = first.title or first.entity_type.value
        date = format_local_date(first.entity_date)
        heading = f"### {title} ({date})" if date else f"### {title}"
        body = "\n".join(
            f"{c.speaker}: {c.content}" if c.speaker else c.content for c in chunks
        )
        parts.append(f"{heading}\n{body}\n")
    return "\n".join(parts)


def assemble(
    transcripts: list[ContentFragment],
    action_items: list[ActionItem],
    documents: list[DocumentRecord],
    schedule_context: str | None = None,
    snippet_length: int = 300,
) -> str | None:
    """Build the context handed to generation.

    Sections appear in a fixed order: schedule, transcripts, action items,
    documents. Returns None when no source produced anything, which callers
    treat as the terminal "no results" branch.
    """
    if not (transcripts or action_items or documents):
        return None
    sections = [
        (schedule_context or "").strip(),
        format_transcripts(transcripts),
        format_action_items_for_context(action_items),
        format_documents_for_context(documents, snippet_length=snippet_length),
    ]
    return "\n\n".join(s for s in sections if s)
