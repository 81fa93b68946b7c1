"""Supabase client and query helpers shared by the retrieval modules."""

from __future__ import annotations

from typing import Any, cast

from supabase import Client, create_client

from src.config import settings


def get_supabase_client() -> Client:
    """Create and return a Supabase client from the configured URL and key."""
    return create_client(settings.supabase_url, settings.supabase_key)


def ilike_pattern(text: str) -> str:
    """Substring ILIKE pattern with ``%``, ``_`` and ``\\`` matched literally."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def rpc_rows(client: Client, function: str, params: dict[str, Any]) -> list[dict[str, Any]]:
    """Call a Postgres function and return its rows."""
    result = client.rpc(function, params).execute()
    # Supabase .data is typed as JSON (broad union); cast to concrete type.
    return cast(list[dict[str, Any]], result.data or [])
