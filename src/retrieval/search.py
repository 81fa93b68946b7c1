"""Transcript search: vector similarity with a keyword fallback."""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from src.db import ilike_pattern, rpc_rows
from src.pipeline_config import KeywordMatchMode, RetrievalConfig
from src.retrieval.embeddings import EmbeddingResult
from src.retrieval.models import AccessScope, ContentFragment, EntityType

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 2
MAX_KEYWORDS = 5


def _search_ids(scope: AccessScope, meeting_id: str | None) -> list[str]:
    """A single meeting overrides the broader scope."""
    if meeting_id:
        return [meeting_id]
    return sorted(scope)


def _to_fragment(row: dict[str, Any], with_similarity: bool) -> ContentFragment:
    similarity = row.get("similarity") if with_similarity else None
    return ContentFragment(
        content=row.get("content") or "",
        entity_id=row.get("entity_id"),
        entity_type=EntityType(row.get("entity_type") or EntityType.TRANSCRIPT),
        similarity=float(similarity) if similarity is not None else None,
        title=row.get("meeting_title"),
        entity_date=row.get("meeting_date"),
        speaker=row.get("speaker"),
    )


def vector_search(
    client: Client,
    embedding: list[float],
    scope: AccessScope,
    limit: int = 15,
    meeting_id: str | None = None,
    floor: float = 0.65,
) -> list[ContentFragment]:
    """Nearest transcript chunks within scope, keeping only ``similarity >= floor``.

    An empty scope returns nothing without querying; it never means "all".
    """
    ids = _search_ids(scope, meeting_id)
    if not ids:
        return []

    rows = rpc_rows(
        client,
        "match_transcript_chunks",
        {
            "query_embedding": embedding,
            "meeting_ids": ids,
            "match_count": limit,
        },
    )
    fragments = [
        _to_fragment(r, with_similarity=True)
        for r in rows
        if r.get("similarity") is not None and float(r["similarity"]) >= floor
    ]
    fragments.sort(key=lambda f: f.similarity or 0.0, reverse=True)
    logger.info(
        "Vector search: %d total, %d at or above %.2f", len(rows), len(fragments), floor
    )
    return fragments


def extract_keywords(text: str) -> list[str]:
    """Whitespace tokens of at least two characters, first five only."""
    return [t for t in text.split() if len(t) >= MIN_KEYWORD_LENGTH][:MAX_KEYWORDS]


def keyword_search(
    client: Client,
    keywords: list[str],
    scope: AccessScope,
    limit: int = 10,
    meeting_id: str | None = None,
    mode: KeywordMatchMode = KeywordMatchMode.ANY,
) -> list[ContentFragment]:
    """Case-insensitive substring search over transcript chunks within scope.

    Results carry no similarity and come back newest meeting first.
    """
    ids = _search_ids(scope, meeting_id)
    if not keywords or not ids:
        return []

    rows = rpc_rows(
        client,
        "keyword_search_chunks",
        {
            "patterns": [ilike_pattern(k) for k in keywords],
            "meeting_ids": ids,
            "match_all": mode is KeywordMatchMode.ALL,
            "match_count": limit,
        },
    )
    return [_to_fragment(r, with_similarity=False) for r in rows]


def search_transcripts(
    client: Client,
    query: str,
    embedding: EmbeddingResult,
    scope: AccessScope,
    meeting_id: str | None = None,
    config: RetrievalConfig | None = None,
) -> list[ContentFragment]:
    """Vector search first; keyword search only when it yields nothing usable.

    The fallback runs when the embedding failed, the vector query raised, or
    no chunk cleared the similarity floor.
    """
    config = config or RetrievalConfig()

    if embedding.ok:
        try:
            fragments = vector_search(
                client,
                embedding.vector or [],
                scope,
                limit=config.transcript_match_count,
                meeting_id=meeting_id,
                floor=config.transcript_similarity_floor,
            )
        except Exception:
            logger.exception("Vector search failed; falling back to keyword search")
            fragments = []
        if fragments:
            return fragments
    else:
        logger.info("No query embedding (%s)", embedding.error)

    logger.info("Falling back to keyword search")
    return keyword_search(
        client,
        extract_keywords(query),
        scope,
        limit=config.keyword_match_count,
        meeting_id=meeting_id,
        mode=config.keyword_match_mode,
    )
