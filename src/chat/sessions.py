"""Supabase persistence for chat sessions and their messages."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, cast

from supabase import Client


class SessionNotFoundError(LookupError):
    """The session does not exist or belongs to another user."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


def _now() -> str:
    return datetime.now(UTC).isoformat()


def create_session(
    client: Client,
    user_id: str,
    meeting_id: str | None = None,
    project_id: str | None = None,
) -> str:
    """Insert a new session and return its id."""
    session_id = str(uuid.uuid4())
    now = _now()
    client.table("chat_sessions").insert(
        {
            "id": session_id,
            "user_id": user_id,
            "meeting_id": meeting_id,
            "project_id": project_id,
            "created_at": now,
            "updated_at": now,
            "last_message_at": now,
        }
    ).execute()
    return session_id


def ensure_session(
    client: Client,
    user_id: str,
    session_id: str | None = None,
    meeting_id: str | None = None,
    project_id: str | None = None,
) -> str:
    """Reuse ``session_id`` (bumping its timestamps) or start a new session.

    Raises:
        SessionNotFoundError: ``session_id`` is not one of the user's sessions.
    """
    if not session_id:
        return create_session(client, user_id, meeting_id, project_id)
    now = _now()
    result = (
        client.table("chat_sessions")
        .update({"last_message_at": now, "updated_at": now})
        .eq("id", session_id)
        .eq("user_id", user_id)
        .execute()
    )
    if not result.data:
        raise SessionNotFoundError(session_id)
    return session_id


def append_message(client: Client, session_id: str, role: str, content: str) -> str:
    """Append a message to a session; messages are never updated."""
    message_id = str(uuid.uuid4())
    client.table("chat_messages").insert(
        {
            "id": message_id,
            "session_id": session_id,
            "role": role,
            "content": content,
            "created_at": _now(),
        }
    ).execute()
    return message_id


def set_title_if_missing(client: Client, session_id: str, user_id: str, title: str) -> None:
    (
        client.table("chat_sessions")
        .update({"title": title[:50]})
        .eq("id", session_id)
        .eq("user_id", user_id)
        .is_("title", "null")
        .execute()
    )


def list_sessions(client: Client, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
    """Return the user's sessions, most recently active first."""
    result = (
        client.table("chat_sessions")
        .select("id,title,meeting_id,project_id,created_at,last_message_at")
        .eq("user_id", user_id)
        .order("last_message_at", desc=True, nullsfirst=False)
        .limit(limit)
        .execute()
    )
    return cast(list[dict[str, Any]], result.data or [])


def get_session(client: Client, session_id: str, user_id: str) -> dict[str, Any] | None:
    result = (
        client.table("chat_sessions")
        .select("id,title,meeting_id,project_id,created_at")
        .eq("id", session_id)
        .eq("user_id", user_id)
        .execute()
    )
    rows = cast(list[dict[str, Any]], result.data or [])
    return rows[0] if rows else None


def list_messages(client: Client, session_id: str) -> list[dict[str, Any]]:
    result = (
        client.table("chat_messages")
        .select("id,role,content,created_at")
        .eq("session_id", session_id)
        .order("created_at")
        .execute()
    )
    return cast(list[dict[str, Any]], result.data or [])


def delete_session(client: Client, session_id: str, user_id: str) -> bool:
    """Delete one of the user's sessions. Returns False if nothing matched."""
    result = (
        client.table("chat_sessions")
        .delete()
        .eq("id", session_id)
        .eq("user_id", user_id)
        .execute()
    )
    return bool(result.data)
