"""Tests for transcript vector search, keyword fallback, and their interplay."""

from __future__ import annotations

from src.pipeline_config import KeywordMatchMode, RetrievalConfig
from src.retrieval.embeddings import EmbeddingResult
from src.retrieval.models import EntityType
from src.retrieval.search import (
    extract_keywords,
    keyword_search,
    search_transcripts,
    vector_search,
)
from tests.fakes import FakeSupabase

EMBEDDING = [0.01] * 1536
OK = EmbeddingResult(vector=EMBEDDING)


def _chunk(content: str, similarity: float | None = None, meeting: str = "m1") -> dict:
    row = {
        "content": content,
        "entity_id": meeting,
        "entity_type": "transcript",
        "meeting_title": "Kickoff",
        "meeting_date": "2025-03-01T09:00:00",
    }
    if similarity is not None:
        row["similarity"] = similarity
    return row


# ---------------------------------------------------------------------------
# Vector search
# ---------------------------------------------------------------------------


class TestVectorSearch:
    def test_empty_scope_short_circuits(self) -> None:
        client = FakeSupabase(rpcs={"match_transcript_chunks": [_chunk("x", 0.9)]})
        assert vector_search(client, EMBEDDING, frozenset()) == []
        assert client.rpc_calls == []

    def test_floor_is_inclusive(self) -> None:
        client = FakeSupabase(
            rpcs={
                "match_transcript_chunks": [
                    _chunk("exact", 0.65),
                    _chunk("below", 0.6499),
                    _chunk("above", 0.9),
                ]
            }
        )
        fragments = vector_search(client, EMBEDDING, frozenset({"m1"}), floor=0.65)
        assert [f.content for f in fragments] == ["above", "exact"]
        assert all(f.similarity is not None and f.similarity >= 0.65 for f in fragments)

    def test_results_ordered_by_similarity(self) -> None:
        client = FakeSupabase(
            rpcs={"match_transcript_chunks": [_chunk("b", 0.7), _chunk("a", 0.95), _chunk("c", 0.8)]}
        )
        fragments = vector_search(client, EMBEDDING, frozenset({"m1"}))
        assert [f.content for f in fragments] == ["a", "c", "b"]

    def test_scope_is_passed_as_meeting_ids(self) -> None:
        client = FakeSupabase()
        vector_search(client, EMBEDDING, frozenset({"m2", "m1"}), limit=7)
        name, params = client.rpc_calls[0]
        assert name == "match_transcript_chunks"
        assert params["meeting_ids"] == ["m1", "m2"]
        assert params["match_count"] == 7

    def test_single_meeting_takes_precedence(self) -> None:
        client = FakeSupabase()
        vector_search(client, EMBEDDING, frozenset({"m1", "m2"}), meeting_id="m2")
        assert client.rpc_calls[0][1]["meeting_ids"] == ["m2"]

    def test_fragment_metadata(self) -> None:
        client = FakeSupabase(rpcs={"match_transcript_chunks": [_chunk("hello", 0.8)]})
        [fragment] = vector_search(client, EMBEDDING, frozenset({"m1"}))
        assert fragment.entity_type is EntityType.TRANSCRIPT
        assert fragment.entity_id == "m1"
        assert fragment.title == "Kickoff"
        assert fragment.similarity == 0.8


# ---------------------------------------------------------------------------
# Keyword search
# ---------------------------------------------------------------------------


class TestExtractKeywords:
    def test_short_tokens_dropped(self) -> None:
        assert extract_keywords("a budget b review") == ["budget", "review"]

    def test_capped_at_five(self) -> None:
        assert extract_keywords("one two three four five six seven") == [
            "one", "two", "three", "four", "five",
        ]

    def test_korean_tokens(self) -> None:
        assert extract_keywords("지난주 회의 내용 알려줘") == ["지난주", "회의", "내용", "알려줘"]

    def test_nothing_survives(self) -> None:
        assert extract_keywords("a b c") == []


class TestKeywordSearch:
    def test_no_keywords_skips_query(self) -> None:
        client = FakeSupabase()
        assert keyword_search(client, [], frozenset({"m1"})) == []
        assert client.rpc_calls == []

    def test_empty_scope_skips_query(self) -> None:
        client = FakeSupabase()
        assert keyword_search(client, ["budget"], frozenset()) == []
        assert client.rpc_calls == []

    def test_patterns_are_substring_and_escaped(self) -> None:
        client = FakeSupabase()
        keyword_search(client, ["budget", "50%", "a_b"], frozenset({"m1"}))
        params = client.rpc_calls[0][1]
        assert params["patterns"] == ["%budget%", "%50\\%%", "%a\\_b%"]
        assert params["match_all"] is False

    def test_match_all_mode(self) -> None:
        client = FakeSupabase()
        keyword_search(client, ["budget"], frozenset({"m1"}), mode=KeywordMatchMode.ALL)
        assert client.rpc_calls[0][1]["match_all"] is True

    def test_results_have_no_similarity(self) -> None:
        client = FakeSupabase(rpcs={"keyword_search_chunks": [_chunk("budget talk")]})
        [fragment] = keyword_search(client, ["budget"], frozenset({"m1"}))
        assert fragment.similarity is None
        assert fragment.content == "budget talk"


# ---------------------------------------------------------------------------
# Vector -> keyword fallback
# ---------------------------------------------------------------------------


class TestSearchTranscripts:
    def test_vector_hits_skip_keyword_search(self) -> None:
        client = FakeSupabase(rpcs={"match_transcript_chunks": [_chunk("hit", 0.9)]})
        fragments = search_transcripts(client, "budget review", OK, frozenset({"m1"}))
        assert [f.content for f in fragments] == ["hit"]
        assert client.rpc_names() == ["match_transcript_chunks"]

    def test_below_floor_falls_back(self) -> None:
        client = FakeSupabase(
            rpcs={
                "match_transcript_chunks": [_chunk("weak", 0.4)],
                "keyword_search_chunks": [_chunk("budget talk")],
            }
        )
        fragments = search_transcripts(client, "budget review", OK, frozenset({"m1"}))
        assert [f.content for f in fragments] == ["budget talk"]
        assert client.rpc_names() == ["match_transcript_chunks", "keyword_search_chunks"]
        assert client.rpc_calls[1][1]["patterns"] == ["%budget%", "%review%"]

    def test_failed_embedding_falls_back_without_vector_query(self) -> None:
        client = FakeSupabase(rpcs={"keyword_search_chunks": [_chunk("budget talk")]})
        failed = EmbeddingResult.failure("timeout")
        fragments = search_transcripts(client, "budget", failed, frozenset({"m1"}))
        assert len(fragments) == 1
        assert client.rpc_names() == ["keyword_search_chunks"]

    def test_vector_store_error_falls_back(self) -> None:
        client = FakeSupabase(
            rpcs={
                "match_transcript_chunks": RuntimeError("index unavailable"),
                "keyword_search_chunks": [_chunk("budget talk")],
            }
        )
        fragments = search_transcripts(client, "budget", OK, frozenset({"m1"}))
        assert [f.content for f in fragments] == ["budget talk"]

    def test_empty_scope_returns_nothing(self) -> None:
        client = FakeSupabase()
        assert search_transcripts(client, "budget review", OK, frozenset()) == []
        assert client.rpc_calls == []

    def test_config_thresholds_are_used(self) -> None:
        client = FakeSupabase(rpcs={"match_transcript_chunks": [_chunk("mid", 0.5)]})
        config = RetrievalConfig(transcript_similarity_floor=0.5, transcript_match_count=3)
        fragments = search_transcripts(client, "budget", OK, frozenset({"m1"}), config=config)
        assert [f.content for f in fragments] == ["mid"]
        assert client.rpc_calls[0][1]["match_count"] == 3
