"""Retrieval and chat endpoints."""

from __future__ import annotations

import asyncio
import logging

from anthropic import APIStatusError
from fastapi import APIRouter, HTTPException

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import (
    ChatRequest,
    ChatResponse,
    Counts,
    FragmentOut,
    RetrieveRequest,
    RetrieveResponse,
    SourceOut,
)
from src.chat import sessions
from src.chat.sessions import SessionNotFoundError
from src.retrieval.context import NO_RESULTS_MESSAGE
from src.retrieval.errors import AccessDeniedError, InvalidQueryError
from src.retrieval.generation import generate_answer
from src.retrieval.models import RetrievalResult, SearchQuery
from src.retrieval.pipeline import retrieve

logger = logging.getLogger(__name__)

router = APIRouter()


async def _retrieve_or_raise(
    query: SearchQuery, user_id: str, client: SupabaseClient
) -> RetrievalResult:
    try:
        return await retrieve(query, user_id, client=client)
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AccessDeniedError as exc:
        raise HTTPException(status_code=403, detail="No access to this meeting") from exc


def _counts(result: RetrievalResult) -> Counts:
    return Counts(
        meeting_count=result.counts.meeting_count,
        document_count=result.counts.document_count,
        task_count=result.counts.task_count,
    )


@router.post("/api/retrieve", response_model=RetrieveResponse)
async def retrieve_context(
    request: RetrieveRequest, user_id: CurrentUser, client: SupabaseClient
) -> RetrieveResponse:
    """Return access-filtered fragments and the assembled context for a query."""
    result = await _retrieve_or_raise(
        SearchQuery(
            text=request.query,
            meeting_id=request.meeting_id,
            project_id=request.project_id,
            search_source=request.search_source,
        ),
        user_id,
        client,
    )
    return RetrieveResponse(
        found=result.found,
        fragments=[
            FragmentOut(
                content=f.content,
                entity_id=f.entity_id,
                entity_type=f.entity_type.value,
                similarity=f.similarity,
                title=f.title,
                entity_date=f.entity_date,
                speaker=f.speaker,
                source=f.source.value if f.source else None,
                category=f.category,
                file_name=f.file_name,
            )
            for f in result.fragments
        ],
        context_text=result.context_text or "",
        counts=_counts(result),
    )


@router.post("/api/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, user_id: CurrentUser, client: SupabaseClient) -> ChatResponse:
    """Answer a chat message from meetings, tasks, and documents the caller can see.

    When retrieval finds nothing the fixed no-results message is returned and
    generation is skipped.
    """
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message required")

    result = await _retrieve_or_raise(
        SearchQuery(
            text=request.message,
            meeting_id=request.meeting_id,
            project_id=request.project_id,
            search_source=request.search_source,
        ),
        user_id,
        client,
    )

    try:
        session_id = await asyncio.to_thread(
            sessions.ensure_session,
            client,
            user_id,
            request.session_id,
            request.meeting_id,
            request.project_id,
        )
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc
    await asyncio.to_thread(sessions.append_message, client, session_id, "user", request.message)

    if not result.found:
        await asyncio.to_thread(
            sessions.append_message, client, session_id, "assistant", NO_RESULTS_MESSAGE
        )
        return ChatResponse(response=NO_RESULTS_MESSAGE, session_id=session_id)

    try:
        generated = await asyncio.to_thread(
            generate_answer, request.message, result.context_text or ""
        )
    except APIStatusError as exc:
        # Claude overloaded (529) or another upstream error surfaces as a JSON 503.
        raise HTTPException(status_code=503, detail=f"LLM unavailable: {exc.message}") from exc

    await asyncio.to_thread(
        sessions.append_message, client, session_id, "assistant", generated["answer"]
    )
    await asyncio.to_thread(
        sessions.set_title_if_missing, client, session_id, user_id, request.message
    )

    return ChatResponse(
        response=generated["answer"],
        session_id=session_id,
        sources=[
            SourceOut(
                title=f.title or f.entity_type.value,
                content=f.content[:150] + ("..." if len(f.content) > 150 else ""),
            )
            for f in result.fragments[:3]
        ],
        suggestions=generated.get("suggestions", []),
        counts=_counts(result),
        model=generated.get("model"),
        usage=generated.get("usage"),
    )
