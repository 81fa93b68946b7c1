"""Meeting endpoints: list the meetings a caller may chat about."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import MeetingSummary
from src.retrieval.access import list_accessible_meetings, resolve_scope

router = APIRouter()


@router.get("/api/meetings", response_model=list[MeetingSummary])
async def list_meetings(
    user_id: CurrentUser, client: SupabaseClient, project_id: str | None = None
) -> list[MeetingSummary]:
    """List owned and shared meetings, newest first, optionally within a project."""
    scope = await asyncio.to_thread(resolve_scope, client, user_id, project_id)
    rows = await asyncio.to_thread(list_accessible_meetings, client, scope)
    return [
        MeetingSummary(
            id=str(m["id"]),
            title=m.get("title") or "Untitled",
            created_at=m.get("created_at"),
        )
        for m in rows
    ]
