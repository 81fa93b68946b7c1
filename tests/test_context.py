"""Tests for context assembly across sources."""

from __future__ import annotations

from src.retrieval.context import assemble, format_transcripts
from src.retrieval.models import (
    ActionItem,
    ContentFragment,
    DocumentRecord,
    DocumentSource,
    EntityType,
)


def _fragment(content: str, meeting: str, title: str, date: str | None = None) -> ContentFragment:
    return ContentFragment(
        content=content,
        entity_id=meeting,
        entity_type=EntityType.TRANSCRIPT,
        similarity=0.8,
        title=title,
        entity_date=date,
    )


ITEM = ActionItem(id="a1", title="Send recap", status="todo", meeting_id="m1")
DOC = DocumentRecord(id="d1", title="Pricing deck", source=DocumentSource.MEETING_MIND)


class TestFormatTranscripts:
    def test_grouped_by_meeting_in_retrieval_order(self) -> None:
        text = format_transcripts(
            [
                _fragment("first m1", "m1", "Kickoff", "2025-03-01T09:00:00"),
                _fragment("only m2", "m2", "Review"),
                _fragment("second m1", "m1", "Kickoff", "2025-03-01T09:00:00"),
            ]
        )
        assert "### Kickoff (2025. 3. 1.)\nfirst m1\nsecond m1" in text
        assert "### Review\nonly m2" in text
        assert text.index("Kickoff") < text.index("Review")

    def test_speaker_prefix(self) -> None:
        fragment = ContentFragment(
            content="Let's ship it.",
            entity_id="m1",
            entity_type=EntityType.TRANSCRIPT,
            title="Kickoff",
            speaker="Minji",
        )
        assert "Minji: Let's ship it." in format_transcripts([fragment])

    def test_untitled_meeting_uses_entity_type(self) -> None:
        fragment = ContentFragment(content="x", entity_id="m1", entity_type=EntityType.MEETING)
        assert "### meeting" in format_transcripts([fragment])


class TestAssemble:
    def test_nothing_found_returns_none(self) -> None:
        assert assemble([], [], []) is None

    def test_schedule_alone_is_still_nothing_found(self) -> None:
        assert assemble([], [], [], schedule_context="Standup at 10:00") is None

    def test_section_order(self) -> None:
        text = assemble(
            [_fragment("we agreed on pricing", "m1", "Kickoff")],
            [ITEM],
            [DOC],
            schedule_context="## Schedule\nStandup at 10:00",
        )
        assert text is not None
        positions = [
            text.index("## Schedule"),
            text.index("## 🗣️ Meeting transcripts"),
            text.index("## Action items"),
            text.index("## 📄 Documents"),
        ]
        assert positions == sorted(positions)

    def test_single_source(self) -> None:
        text = assemble([], [], [DOC])
        assert text is not None
        assert "Pricing deck" in text
        assert "Meeting transcripts" not in text
