"""Exceptions raised by the retrieval pipeline."""

from __future__ import annotations


class RetrievalError(Exception):
    """Base class for retrieval failures surfaced to callers."""


class InvalidQueryError(RetrievalError):
    """The query is missing or blank; no retrieval work was done."""


class AccessDeniedError(RetrievalError):
    """The caller may not search the requested meeting.

    Raised both for meetings that do not exist and for meetings that are
    not shared with the caller, so existence is never revealed.
    """

    def __init__(self, meeting_id: str) -> None:
        super().__init__(f"No access to meeting {meeting_id}")
        self.meeting_id = meeting_id


class EmbeddingError(RetrievalError):
    """The embedding service failed or returned an unusable vector."""
