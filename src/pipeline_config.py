"""Retrieval configuration: source/filter enums and RetrievalConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.config import Settings, settings


class SearchSource(str, Enum):
    """Content sources the retrieval pipeline can search."""

    MEETING = "meeting"
    TASK = "task"
    DOCUMENT = "document"


class KeywordMatchMode(str, Enum):
    """How multiple keyword tokens are combined in the fallback search."""

    ANY = "any"
    ALL = "all"


class StatusFilter(str, Enum):
    """Status sub-filter for task and action-item lookups."""

    ALL = "all"
    TODO = "todo"
    DONE = "done"


@dataclass(frozen=True)
class RetrievalConfig:
    """Immutable knobs for a single retrieval run.

    Defaults mirror the production thresholds; ``from_settings`` lets
    deployments override them through the environment.
    """

    transcript_similarity_floor: float = 0.65
    document_similarity_floor: float = 0.35
    keyword_proxy_similarity: float = 0.6
    keyword_match_mode: KeywordMatchMode = KeywordMatchMode.ANY
    transcript_match_count: int = 15
    keyword_match_count: int = 10
    document_match_count: int = 10
    action_item_match_count: int = 30
    snippet_length: int = 300

    @classmethod
    def from_settings(cls, source: Settings = settings) -> RetrievalConfig:
        return cls(
            transcript_similarity_floor=source.transcript_similarity_floor,
            document_similarity_floor=source.document_similarity_floor,
            keyword_proxy_similarity=source.keyword_proxy_similarity,
            keyword_match_mode=KeywordMatchMode(source.keyword_match_mode),
            transcript_match_count=source.transcript_match_count,
            keyword_match_count=source.keyword_match_count,
            document_match_count=source.document_match_count,
            action_item_match_count=source.action_item_match_count,
            snippet_length=source.snippet_length,
        )
