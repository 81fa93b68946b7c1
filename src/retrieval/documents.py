"""Document search across both origin systems."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from supabase import Client

from src.db import ilike_pattern, rpc_rows
from src.pipeline_config import RetrievalConfig
from src.retrieval.embeddings import EmbeddingResult
from src.retrieval.formatting import format_local_date, truncate
from src.retrieval.models import ContentFragment, DocumentRecord, DocumentSource, EntityType

logger = logging.getLogger(__name__)

SOURCE_LABELS: dict[DocumentSource, str] = {
    DocumentSource.MEETING_MIND: "Meeting document",
    DocumentSource.SCHEDULE_MANAGER: "Project document",
}


def extract_highlight(text: str, query: str, context_length: int = 150) -> str:
    """Return the window of ``text`` around the first case-insensitive hit of ``query``."""
    if not text or not query:
        return ""
    index = text.lower().find(query.lower())
    if index == -1:
        return text[:context_length] + "..."

    start = max(0, index - context_length // 2)
    end = min(len(text), index + len(query) + context_length // 2)
    highlight = text[start:end]
    if start > 0:
        highlight = "..." + highlight
    if end < len(text):
        highlight = highlight + "..."
    return highlight


def _vector_documents(
    client: Client, embedding: list[float], limit: int, floor: float
) -> list[DocumentRecord]:
    rows = rpc_rows(
        client,
        "match_document_chunks",
        {"query_embedding": embedding, "match_count": limit},
    )
    return [
        DocumentRecord(
            id=str(r["id"]),
            title=r.get("title") or "",
            source=DocumentSource.MEETING_MIND,
            file_name=r.get("file_name"),
            file_type=r.get("file_type"),
            extracted_text=r.get("extracted_text"),
            summary=r.get("summary"),
            created_at=r.get("created_at"),
            matched_content=r.get("matched_content"),
            similarity=float(r["similarity"]),
        )
        for r in rows
        if r.get("similarity") is not None and float(r["similarity"]) >= floor
    ]


def _keyword_documents(
    client: Client, query: str, limit: int, proxy: float
) -> list[DocumentRecord]:
    rows = rpc_rows(
        client,
        "keyword_search_documents",
        {"pattern": ilike_pattern(query), "match_count": limit},
    )
    return [
        DocumentRecord(
            id=str(r["id"]),
            title=r.get("title") or "",
            source=DocumentSource.MEETING_MIND,
            file_name=r.get("file_name"),
            file_type=r.get("file_type"),
            extracted_text=r.get("extracted_text"),
            summary=r.get("summary"),
            created_at=r.get("created_at"),
            matched_content=extract_highlight(
                r.get("extracted_text") or r.get("summary") or "", query
            ),
            similarity=proxy,
        )
        for r in rows
    ]


def _keyword_project_documents(
    client: Client, query: str, limit: int, proxy: float
) -> list[DocumentRecord]:
    rows = rpc_rows(
        client,
        "keyword_search_project_documents",
        {"pattern": ilike_pattern(query), "match_count": limit},
    )
    return [
        DocumentRecord(
            id=str(r["id"]),
            title=r.get("title") or "",
            source=DocumentSource.SCHEDULE_MANAGER,
            file_name=r.get("original_name"),
            file_type=r.get("file_type"),
            extracted_text=r.get("description"),
            category=r.get("category"),
            created_at=r.get("created_at"),
            matched_content=extract_highlight(r.get("description") or r.get("title") or "", query),
            similarity=proxy,
        )
        for r in rows
    ]


def merge_documents(*batches: Iterable[DocumentRecord], limit: int) -> list[DocumentRecord]:
    """Merge result batches: first-seen wins per ``id``, then sort and cap.

    Pass vector hits before keyword hits so a vector similarity is kept when
    the same document shows up in both.
    """
    merged: dict[str, DocumentRecord] = {}
    for batch in batches:
        for doc in batch:
            merged.setdefault(doc.id, doc)
    ranked = sorted(merged.values(), key=lambda d: d.similarity or 0.0, reverse=True)
    return ranked[:limit]


def search_documents(
    client: Client,
    query: str,
    embedding: EmbeddingResult,
    limit: int | None = None,
    sources: frozenset[DocumentSource] | None = None,
    config: RetrievalConfig | None = None,
) -> list[DocumentRecord]:
    """Search meeting-mind documents (vector + keyword) and project documents (keyword).

    Each stage fails independently; a failing stage contributes no results.

    Args:
        client: Supabase client.
        query: Raw query text.
        embedding: Query embedding; vector search is skipped when it failed.
        limit: Final result cap (defaults to ``config.document_match_count``).
        sources: Origin systems to search; ``None`` searches both.
        config: Retrieval thresholds.

    Returns:
        Documents unique by id, highest similarity first.
    """
    config = config or RetrievalConfig()
    limit = limit or config.document_match_count
    sources = sources or frozenset(DocumentSource)

    vector_hits: list[DocumentRecord] = []
    keyword_hits: list[DocumentRecord] = []
    project_hits: list[DocumentRecord] = []

    if DocumentSource.MEETING_MIND in sources:
        if embedding.ok:
            try:
                vector_hits = _vector_documents(
                    client, embedding.vector or [], limit, config.document_similarity_floor
                )
            except Exception:
                logger.exception("Document vector search failed")
        try:
            keyword_hits = _keyword_documents(
                client, query, limit, config.keyword_proxy_similarity
            )
        except Exception:
            logger.exception("Document keyword search failed")

    if DocumentSource.SCHEDULE_MANAGER in sources:
        try:
            project_hits = _keyword_project_documents(
                client, query, limit, config.keyword_proxy_similarity
            )
        except Exception:
            logger.exception("Project document search failed")

    logger.info(
        "Document search: %d vector, %d keyword, %d project",
        len(vector_hits),
        len(keyword_hits),
        len(project_hits),
    )
    return merge_documents(vector_hits, keyword_hits, project_hits, limit=limit)


def format_documents_for_context(documents: list[DocumentRecord], snippet_length: int = 300) -> str:
    """Render documents with title, file, date, origin label, category and snippet."""
    if not documents:
        return ""

    parts = ["## 📄 Documents\n"]
    for index, doc in enumerate(documents, 1):
        category = f" [{doc.category}]" if doc.category else ""
        lines = [
            f"### {index}. {doc.title}",
            f"- 📁 File: {doc.file_name or '-'}",
            f"- 📅 Date: {format_local_date(doc.created_at)}",
            f"- 🏷️ Source: {SOURCE_LABELS[doc.source]}{category}",
        ]
        if doc.summary:
            lines.append(f"- 📝 Summary: {truncate(doc.summary, 200)}")
        if doc.matched_content:
            lines.append(f"- 🔍 Match: {truncate(doc.matched_content, snippet_length)}")
        parts.append("\n".join(lines) + "\n")
    return "\n".join(parts)


def to_fragments(documents: list[DocumentRecord]) -> list[ContentFragment]:
    return [
        ContentFragment(
            content=d.matched_content or d.summary or d.title,
            entity_id=d.id,
            entity_type=EntityType.DOCUMENT,
            similarity=d.similarity,
            title=d.title,
            entity_date=d.created_at,
            source=d.source,
            category=d.category,
            file_name=d.file_name,
        )
        for d in documents
    ]


def row_preview(doc: DocumentRecord) -> dict[str, Any]:
    """Shape returned by the document search endpoint."""
    return {
        "id": doc.id,
        "title": doc.title,
        "file_name": doc.file_name,
        "file_type": doc.file_type,
        "summary": doc.summary[:300] if doc.summary else None,
        "source": doc.source.value,
        "category": doc.category,
        "similarity": doc.similarity,
        "highlight": doc.matched_content,
        "created_at": doc.created_at,
    }
