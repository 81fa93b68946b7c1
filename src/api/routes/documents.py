"""Standalone document search endpoint."""

from __future__ import annotations

import asyncio
from typing import Literal

from fastapi import APIRouter, HTTPException, Query

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import DocumentSearchResponse
from src.pipeline_config import RetrievalConfig
from src.retrieval.documents import row_preview, search_documents
from src.retrieval.embeddings import embed_query
from src.retrieval.models import DocumentSource

router = APIRouter()


@router.get("/api/documents/search", response_model=DocumentSearchResponse)
async def document_search(
    user_id: CurrentUser,
    client: SupabaseClient,
    q: str = "",
    limit: int = Query(default=10, ge=1, le=50),
    source: Literal["all", "meeting-mind", "schedule-manager"] = "all",
) -> DocumentSearchResponse:
    """Search documents from both origin systems, highest similarity first."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query required")

    sources = frozenset(DocumentSource) if source == "all" else frozenset({DocumentSource(source)})
    embedding = await asyncio.to_thread(embed_query, query)
    documents = await asyncio.to_thread(
        search_documents,
        client,
        query,
        embedding,
        limit,
        sources,
        RetrievalConfig.from_settings(),
    )
    return DocumentSearchResponse(
        query=query,
        total=len(documents),
        results=[row_preview(d) for d in documents],
    )
