"""Chat session history endpoints."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Response

from src.api.deps import CurrentUser, SupabaseClient
from src.api.models import MessageOut, SessionCreateRequest, SessionDetail, SessionSummary
from src.chat import sessions

router = APIRouter()


@router.get("/api/sessions", response_model=list[SessionSummary])
async def list_sessions(user_id: CurrentUser, client: SupabaseClient) -> list[SessionSummary]:
    rows = await asyncio.to_thread(sessions.list_sessions, client, user_id)
    return [
        SessionSummary(
            id=str(s["id"]),
            title=s.get("title") or "New chat",
            meeting_id=s.get("meeting_id"),
            project_id=s.get("project_id"),
            created_at=s.get("created_at"),
            last_message_at=s.get("last_message_at"),
        )
        for s in rows
    ]


@router.post("/api/sessions")
async def create_session(
    request: SessionCreateRequest, user_id: CurrentUser, client: SupabaseClient
) -> dict[str, str]:
    session_id = await asyncio.to_thread(
        sessions.create_session, client, user_id, request.meeting_id, request.project_id
    )
    return {"session_id": session_id}


@router.get("/api/sessions/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: str, user_id: CurrentUser, client: SupabaseClient
) -> SessionDetail:
    """Return one of the caller's sessions with its messages in order."""
    found = await asyncio.to_thread(sessions.get_session, client, session_id, user_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Session not found")
    messages = await asyncio.to_thread(sessions.list_messages, client, session_id)
    return SessionDetail(
        session=found,
        messages=[MessageOut(role=m["role"], content=m["content"]) for m in messages],
    )


@router.delete("/api/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, user_id: CurrentUser, client: SupabaseClient) -> Response:
    if not await asyncio.to_thread(sessions.delete_session, client, session_id, user_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=204)
