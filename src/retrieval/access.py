"""Meeting visibility: which meetings a user may search.

A meeting is visible to a user when the user owns it or when a share record
names the user's id. ``check_access`` is defined in terms of
``resolve_accessible_meeting_ids`` so the point check and the enumeration
cannot drift apart.
"""

from __future__ import annotations

from typing import Any, cast

from supabase import Client

from src.retrieval.models import AccessScope


def _column(rows: Any, name: str) -> set[str]:
    return {str(r[name]) for r in cast(list[dict[str, Any]], rows or []) if r.get(name)}


def resolve_accessible_meeting_ids(client: Client, user_id: str) -> AccessScope:
    """Return ids of meetings owned by or shared with ``user_id``."""
    owned = client.table("meetings").select("id").eq("user_id", user_id).execute()
    shared = client.table("meeting_shares").select("meeting_id").eq("user_id", user_id).execute()
    return frozenset(_column(owned.data, "id") | _column(shared.data, "meeting_id"))


def check_access(client: Client, meeting_id: str, user_id: str) -> bool:
    """Return True if ``user_id`` may see ``meeting_id``."""
    return meeting_id in resolve_accessible_meeting_ids(client, user_id)


def get_project_meeting_ids(client: Client, project_id: str) -> AccessScope:
    """Return ids of meetings linked to ``project_id``."""
    result = (
        client.table("meeting_projects").select("meeting_id").eq("project_id", project_id).execute()
    )
    return frozenset(_column(result.data, "meeting_id"))


def resolve_scope(client: Client, user_id: str, project_id: str | None = None) -> AccessScope:
    """Accessible meetings, narrowed to a project's meetings when one is given."""
    scope = resolve_accessible_meeting_ids(client, user_id)
    if project_id and scope:
        scope = scope & get_project_meeting_ids(client, project_id)
    return scope


def list_accessible_meetings(client: Client, scope: AccessScope, limit: int = 50) -> list[dict[str, Any]]:
    """Return ``id``, ``title`` and ``created_at`` for meetings in scope, newest first."""
    if not scope:
        return []
    result = (
        client.table("meetings")
        .select("id,title,created_at")
        .in_("id", sorted(scope))
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return cast(list[dict[str, Any]], result.data or [])


def resolve_accessible_project_ids(client: Client, user_id: str) -> frozenset[str]:
    """Return ids of projects owned by ``user_id`` or listing them as a member."""
    owned = client.table("projects").select("id").eq("owner_id", user_id).execute()
    member = client.table("project_members").select("project_id").eq("user_id", user_id).execute()
    return frozenset(_column(owned.data, "id") | _column(member.data, "project_id"))


def list_accessible_projects(client: Client, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
    """Return ``id``, ``name``, ``color`` and ``created_at`` of the user's projects, newest first."""
    project_ids = resolve_accessible_project_ids(client, user_id)
    if not project_ids:
        return []
    result = (
        client.table("projects")
        .select("id,name,color,created_at")
        .in_("id", sorted(project_ids))
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return cast(list[dict[str, Any]], result.data or [])
