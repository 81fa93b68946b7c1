"""Retrieval entry point: scope, route, search every active source, assemble."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from supabase import Client

from src.db import get_supabase_client
from src.pipeline_config import RetrievalConfig, SearchSource
from src.retrieval import action_items as action_item_search
from src.retrieval import documents as document_search
from src.retrieval.access import check_access, resolve_scope
from src.retrieval.context import assemble
from src.retrieval.embeddings import EmbeddingResult, embed_query
from src.retrieval.errors import AccessDeniedError, InvalidQueryError
from src.retrieval.models import (
    AccessScope,
    ActionItem,
    ContentFragment,
    DocumentRecord,
    ResultCounts,
    RetrievalResult,
    SearchQuery,
)
from src.retrieval.router import (
    IntentClassifier,
    default_classifier,
    parse_assignee_only,
    parse_status_filter,
    resolve_sources,
)
from src.retrieval.search import search_transcripts

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _degrade(label: str, func: Callable[..., list[T]], *args: object) -> list[T]:
    """Run a blocking search in a worker thread; a failure yields no results."""
    try:
        return await asyncio.to_thread(func, *args)
    except Exception:
        logger.exception("%s search failed; continuing without it", label)
        return []


async def _nothing() -> list:
    return []


async def retrieve(
    query: SearchQuery,
    user_id: str,
    client: Client | None = None,
    classifier: IntentClassifier | None = None,
    config: RetrievalConfig | None = None,
    schedule_context: str | None = None,
) -> RetrievalResult:
    """Retrieve access-filtered context for a chat message.

    Args:
        query: Message text plus optional meeting/project scoping and source
            override.
        user_id: Caller identity, used for visibility and "my items" filters.
        client: Supabase client (created from the environment if omitted).
        classifier: Intent classifier (defaults to the keyword vocabulary).
        config: Retrieval thresholds and limits.
        schedule_context: Optional pre-rendered scheduling/attendee text that
            leads the assembled context.

    Returns:
        A RetrievalResult; ``context_text`` is None when nothing was found.

    Raises:
        InvalidQueryError: The message is blank.
        AccessDeniedError: ``query.meeting_id`` is not visible to the caller.
    """
    text = (query.text or "").strip()
    if not text:
        raise InvalidQueryError("Query text is required")

    client = client or get_supabase_client()
    classifier = classifier or default_classifier
    config = config or RetrievalConfig.from_settings()

    if query.meeting_id and not await asyncio.to_thread(
        check_access, client, query.meeting_id, user_id
    ):
        raise AccessDeniedError(query.meeting_id)

    scope: AccessScope = await asyncio.to_thread(resolve_scope, client, user_id, query.project_id)
    flags = classifier.classify(text)
    sources = resolve_sources(flags, query.search_source)

    logger.info(
        "Chat query %r | meeting=%s project=%s user=%s | sources=%s",
        text[:50],
        query.meeting_id or "all",
        query.project_id or "all",
        user_id,
        ",".join(sorted(s.value for s in sources)),
    )

    needs_embedding = bool(sources & {SearchSource.MEETING, SearchSource.DOCUMENT})
    embedding = (
        await asyncio.to_thread(embed_query, text)
        if needs_embedding
        else EmbeddingResult.failure("not requested")
    )

    transcripts_job = (
        _degrade(
            "Transcript",
            search_transcripts,
            client,
            text,
            embedding,
            scope,
            query.meeting_id,
            config,
        )
        if SearchSource.MEETING in sources
        else _nothing()
    )
    action_items_job = (
        _degrade(
            "Action item",
            action_item_search.get_action_items_for_chat,
            client,
            scope,
            query.meeting_id,
            query.project_id,
            parse_status_filter(text),
            user_id if parse_assignee_only(text) else None,
            config.action_item_match_count,
        )
        if SearchSource.TASK in sources
        else _nothing()
    )
    documents_job = (
        _degrade(
            "Document",
            document_search.search_documents,
            client,
            text,
            embedding,
            config.document_match_count,
            None,
            config,
        )
        if SearchSource.DOCUMENT in sources
        else _nothing()
    )

    transcripts, items, docs = await asyncio.gather(
        transcripts_job, action_items_job, documents_job
    )
    return build_result(transcripts, items, docs, config, schedule_context)


def build_result(
    transcripts: list[ContentFragment],
    items: list[ActionItem],
    docs: list[DocumentRecord],
    config: RetrievalConfig,
    schedule_context: str | None = None,
) -> RetrievalResult:
    fragments = [
        *transcripts,
        *action_item_search.to_fragments(items),
        *document_search.to_fragments(docs),
    ]
    counts = ResultCounts(
        meeting_count=len({f.entity_id for f in transcripts if f.entity_id}),
        document_count=len(docs),
        task_count=len(items),
    )
    logger.info(
        "Retrieved %d transcript chunks (%d meetings), %d action items, %d documents",
        len(transcripts),
        counts.meeting_count,
        counts.task_count,
        counts.document_count,
    )
    return RetrievalResult(
        fragments=fragments,
        action_items=items,
        documents=docs,
        context_text=assemble(
            transcripts,
            items,
            docs,
            schedule_context=schedule_context,
            snippet_length=config.snippet_length,
        ),
        counts=counts,
    )
