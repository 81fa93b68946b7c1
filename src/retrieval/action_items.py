"""Action items and their converted tasks for chat context."""

from __future__ import annotations

from typing import Any

from supabase import Client

from src.db import rpc_rows
from src.pipeline_config import StatusFilter
from src.retrieval.formatting import format_short_date
from src.retrieval.models import AccessScope, ActionItem, ContentFragment, EntityType

TASK_STATUS_GLYPHS: dict[str, str] = {
    "DONE": "✅",
    "IN_PROGRESS": "🔄",
    "IN_REVIEW": "👀",
    "BLOCKED": "🚫",
}
ACTION_ITEM_STATUS_GLYPHS: dict[str, str] = {
    "done": "✅",
    "in_progress": "🔄",
}
DEFAULT_GLYPH = "⏳"
UNGROUPED_LABEL = "Other"


def _item_from_row(row: dict[str, Any]) -> ActionItem:
    return ActionItem(
        id=str(row["id"]),
        title=row.get("title") or "",
        status=row.get("status") or "todo",
        meeting_id=str(row.get("meeting_id") or ""),
        meeting_title=row.get("meeting_title"),
        meeting_date=row.get("meeting_date"),
        description=row.get("description"),
        priority=row.get("priority"),
        assignee_name=row.get("assignee_name"),
        assignee_email=row.get("assignee_email"),
        due_date=row.get("due_date"),
        converted_to_type=row.get("converted_to_type"),
        converted_to_id=row.get("converted_to_id"),
        task_status=row.get("task_status"),
        task_due_date=row.get("task_due_date"),
        project_id=row.get("project_id"),
        project_name=row.get("project_name"),
    )


def filter_by_status(items: list[ActionItem], status: StatusFilter) -> list[ActionItem]:
    """Apply a status filter using each item's effective (task-first) status."""
    if status is StatusFilter.DONE:
        return [i for i in items if i.is_done]
    if status is StatusFilter.TODO:
        return [i for i in items if not i.is_done]
    return list(items)


def get_action_items_for_chat(
    client: Client,
    scope: AccessScope,
    meeting_id: str | None = None,
    project_id: str | None = None,
    status: StatusFilter = StatusFilter.ALL,
    assignee_id: str | None = None,
    limit: int = 30,
) -> list[ActionItem]:
    """Fetch action items from meetings in ``scope``, newest meeting first.

    Args:
        client: Supabase client.
        scope: Meeting ids the caller may see.
        meeting_id: Optional single meeting filter.
        project_id: Optional project filter (via meeting membership).
        status: ``todo``/``done``/``all``, judged on the linked task's status
            when one exists.
        assignee_id: When set, only items assigned to this user.
        limit: Maximum number of items.
    """
    if not scope:
        return []
    rows = rpc_rows(
        client,
        "action_items_for_chat",
        {
            "meeting_ids": sorted(scope),
            "filter_meeting_id": meeting_id,
            "filter_project_id": project_id,
            "status_filter": status.value,
            "filter_assignee_id": assignee_id,
            "match_count": limit,
        },
    )
    items = [_item_from_row(r) for r in rows]
    return filter_by_status(items, status)[:limit]


def status_glyph(item: ActionItem) -> str:
    """Glyph for the item's status; a linked task's status always wins."""
    if item.task_status:
        return TASK_STATUS_GLYPHS.get(item.task_status, DEFAULT_GLYPH)
    return ACTION_ITEM_STATUS_GLYPHS.get(item.status, DEFAULT_GLYPH)


def _format_item(item: ActionItem) -> str:
    due = item.task_due_date or item.due_date
    lines = [
        f"{status_glyph(item)} **{item.title}**",
        f"   - Assignee: {item.assignee_name or 'unassigned'} | "
        f"Due: {format_short_date(due) if due else 'no due date'}",
        f"   - Meeting: {item.meeting_title or 'untitled'} ({format_short_date(item.meeting_date)})",
    ]
    if item.converted_to_type == "task":
        lines.append(f"   - 🔄 Converted to task (status: {item.task_status or 'unknown'})")
    elif item.converted_to_type == "issue":
        lines.append("   - 🐛 Converted to issue")
    return "\n".join(lines) + "\n"


def format_action_items_for_context(items: list[ActionItem]) -> str:
    """Render items grouped by project, with unlinked items last."""
    if not items:
        return ""

    by_project: dict[str, list[ActionItem]] = {}
    ungrouped: list[ActionItem] = []
    for item in items:
        if item.project_name:
            by_project.setdefault(item.project_name, []).append(item)
        else:
            ungrouped.append(item)

    parts = [f"## Action items ({len(items)} total)\n"]
    for project_name, project_items in by_project.items():
        parts.append(f"### 📁 {project_name}")
        parts.extend(_format_item(i) for i in project_items)
    if ungrouped:
        parts.append(f"### 📋 {UNGROUPED_LABEL}")
        parts.extend(_format_item(i) for i in ungrouped)
    return "\n".join(parts)


def summarize_action_items(items: list[ActionItem]) -> dict[str, int]:
    """Counts shown alongside the action-item list."""
    return {
        "total": len(items),
        "todo": sum(1 for i in items if not i.is_done),
        "done": sum(1 for i in items if i.is_done),
        "converted_to_task": sum(1 for i in items if i.converted_to_type == "task"),
        "converted_to_issue": sum(1 for i in items if i.converted_to_type == "issue"),
        "unassigned": sum(1 for i in items if not i.assignee_name),
    }


def to_fragments(items: list[ActionItem]) -> list[ContentFragment]:
    return [
        ContentFragment(
            content=i.description or i.title,
            entity_id=i.id,
            entity_type=EntityType.TASK if i.task_status else EntityType.ACTION_ITEM,
            title=i.title,
            entity_date=i.task_due_date or i.due_date,
        )
        for i in items
    ]
