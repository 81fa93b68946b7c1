"""Project endpoints: list the projects a caller can scope chat to."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import ProjectSummary
from src.retrieval.access import list_accessible_projects

router = APIRouter()


@router.get("/api/projects", response_model=list[ProjectSummary])
async def list_projects(user_id: CurrentUser, client: SupabaseClient) -> list[ProjectSummary]:
    """List owned and member projects, newest first."""
    rows = await asyncio.to_thread(list_accessible_projects, client, user_id)
    return [
        ProjectSummary(
            id=str(p["id"]),
            name=p.get("name") or "Untitled",
            color=p.get("color"),
            created_at=p.get("created_at"),
        )
        for p in rows
    ]
