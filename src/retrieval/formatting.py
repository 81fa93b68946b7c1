"""Shared text helpers for context rendering."""

from __future__ import annotations

from datetime import date, datetime

DateLike = datetime | date | str | None


def _as_date(value: DateLike) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value


def format_local_date(value: DateLike) -> str:
    """Full date in the assistant's locale, e.g. ``2025. 3. 7.``."""
    d = _as_date(value)
    return f"{d.year}. {d.month}. {d.day}." if d else ""


def format_short_date(value: DateLike) -> str:
    """Month and day only, e.g. ``3/7``."""
    d = _as_date(value)
    return f"{d.month}/{d.day}" if d else ""


def truncate(text: str, length: int) -> str:
    return text if len(text) <= length else text[:length] + "..."
