"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException
from supabase import Client

from src.db import get_supabase_client


def current_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Caller identity, set by the authenticating proxy in front of the API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Login required")
    return x_user_id


def supabase_client() -> Client:
    return get_supabase_client()


CurrentUser = Annotated[str, Depends(current_user_id)]
SupabaseClient = Annotated[Client, Depends(supabase_client)]
