"""Action item listing for the chat sidebar."""

from __future__ import annotations

import asyncio
from typing import Literal

from fastapi import APIRouter

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import ActionItemOut, ActionItemsResponse
from src.config import settings
from src.pipeline_config import StatusFilter
from src.retrieval.access import resolve_scope
from src.retrieval.action_items import (
    format_action_items_for_context,
    get_action_items_for_chat,
    summarize_action_items,
)

router = APIRouter()


@router.get("/api/action-items", response_model=ActionItemsResponse)
async def list_action_items(
    user_id: CurrentUser,
    client: SupabaseClient,
    project_id: str | None = None,
    meeting_id: str | None = None,
    status: StatusFilter = StatusFilter.ALL,
    mine: bool = False,
    format: Literal["json", "markdown"] = "json",
) -> ActionItemsResponse:
    """List action items from meetings the caller can see.

    ``mine=true`` keeps only items assigned to the caller; ``format=markdown``
    returns the same rendering the chat context uses.
    """
    scope = await asyncio.to_thread(resolve_scope, client, user_id, project_id)
    items = await asyncio.to_thread(
        get_action_items_for_chat,
        client,
        scope,
        meeting_id,
        project_id,
        status,
        user_id if mine else None,
        settings.action_item_match_count,
    )

    if format == "markdown":
        return ActionItemsResponse(
            markdown=format_action_items_for_context(items) or "No action items found.",
            count=len(items),
        )

    return ActionItemsResponse(
        items=[
            ActionItemOut(
                id=i.id,
                title=i.title,
                status=i.status,
                effective_status=i.effective_status,
                meeting_id=i.meeting_id,
                meeting_title=i.meeting_title,
                assignee_name=i.assignee_name,
                due_date=i.task_due_date or i.due_date,
                converted_to_type=i.converted_to_type,
                task_status=i.task_status,
                project_name=i.project_name,
            )
            for i in items
        ],
        stats=summarize_action_items(items),
        count=len(items),
    )
