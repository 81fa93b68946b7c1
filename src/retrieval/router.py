"""Query router: decide which sources a chat message should search."""

from __future__ import annotations

import re
from typing import Protocol

from src.pipeline_config import SearchSource, StatusFilter
from src.retrieval.models import IntentFlags


def _vocabulary(korean: list[str], english: list[str]) -> re.Pattern[str]:
    """Korean terms match as substrings; English terms match whole words."""
    alternatives = [re.escape(k) for k in korean]
    for e in english:
        word = re.escape(e).replace(r"\ ", r"[\s-]?")
        alternatives.append(rf"\b{word}\b")
    return re.compile("|".join(alternatives), re.IGNORECASE)


_TASK_VOCABULARY = _vocabulary(
    [
        "액션 아이템", "액션아이템", "할 일", "할일", "투두",
        "미완료", "완료 안", "안 된", "안된",
        "담당", "배정", "맡은", "할당",
        "진행 상황", "진행상황", "진행률", "태스크",
    ],
    ["action item", "action items", "todo", "todos", "to do", "task", "tasks",
     "assigned", "assignment", "assignments", "progress"],
)

_DOCUMENT_VOCABULARY = _vocabulary(
    [
        "문서", "파일", "자료", "첨부", "업로드",
        "요구사항", "명세서", "기능정의", "설계", "기획",
        "엑셀", "한글", "워드", "보고서", "회의록", "발표자료", "제안서",
    ],
    ["document", "documents", "file", "files", "upload", "uploaded",
     "attachment", "attachments", "report", "reports", "spec", "specs",
     "pdf", "ppt"],
)

_DOCUMENT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"어떤.*문서"),
    re.compile(r"문서.*있"),
    re.compile(r"파일.*찾"),
    re.compile(r"자료.*검색"),
    re.compile(r"업로드.*된"),
    re.compile(r"첨부.*파일"),
    re.compile(r"관련.*자료"),
    re.compile(r"정의서"),
    re.compile(r"\bwhich\s+(docs|documents|files)\b", re.IGNORECASE),
    re.compile(r"\brelated\s+(material|materials|docs)\b", re.IGNORECASE),
]

# "done" language only counts when no negation / incompletion term is present
_DONE_TERMS = _vocabulary(["완료"], ["done", "completed", "finished", "closed"])
_NEGATION_TERMS = _vocabulary(
    ["미완료", "안"],
    ["not", "incomplete", "unfinished", "pending", "open", "remaining", "outstanding"],
)
_TODO_TERMS = _vocabulary(
    ["미완료", "안 된", "안된", "진행"],
    ["not done", "incomplete", "unfinished", "pending", "open", "remaining",
     "outstanding", "in progress", "ongoing"],
)
_ASSIGNEE_TERMS = _vocabulary(
    ["내가", "내 ", "나의", "제가", "저의", "내꺼", "제 담당"],
    ["my", "mine", "assigned to me", "me"],
)


class IntentClassifier(Protocol):
    """Anything that can flag task and document intent in a message."""

    def classify(self, text: str) -> IntentFlags: ...


class KeywordIntentClassifier:
    """Vocabulary and pattern based classifier (Korean and English)."""

    def __init__(
        self,
        task_vocabulary: re.Pattern[str] = _TASK_VOCABULARY,
        document_vocabulary: re.Pattern[str] = _DOCUMENT_VOCABULARY,
        document_patterns: list[re.Pattern[str]] | None = None,
    ) -> None:
        self.task_vocabulary = task_vocabulary
        self.document_vocabulary = document_vocabulary
        self.document_patterns = (
            _DOCUMENT_PATTERNS if document_patterns is None else document_patterns
        )

    def classify(self, text: str) -> IntentFlags:
        return IntentFlags(
            task=bool(self.task_vocabulary.search(text)),
            document=bool(self.document_vocabulary.search(text))
            or any(p.search(text) for p in self.document_patterns),
        )


default_classifier = KeywordIntentClassifier()


def classify(text: str) -> IntentFlags:
    """Classify ``text`` with the default vocabulary."""
    return default_classifier.classify(text)


def resolve_sources(
    flags: IntentFlags, override: SearchSource | None = None
) -> frozenset[SearchSource]:
    """Sources to search for a message.

    An explicit override is authoritative and suppresses every other source.
    Otherwise transcripts are always searched, plus tasks and documents when
    their intent is detected.
    """
    if override is not None:
        return frozenset({override})
    sources = {SearchSource.MEETING}
    if flags.task:
        sources.add(SearchSource.TASK)
    if flags.document:
        sources.add(SearchSource.DOCUMENT)
    return frozenset(sources)


def parse_status_filter(text: str) -> StatusFilter:
    """Derive a todo/done/all filter from a message.

    Examples:
        "완료된 태스크"        -> DONE
        "지난주 미완료 태스크" -> TODO
        "tasks in progress"    -> TODO
        "all tasks"            -> ALL
    """
    if _DONE_TERMS.search(text) and not _NEGATION_TERMS.search(text):
        return StatusFilter.DONE
    if _TODO_TERMS.search(text):
        return StatusFilter.TODO
    return StatusFilter.ALL


def parse_assignee_only(text: str) -> bool:
    """True when the message asks about the caller's own items."""
    return bool(_ASSIGNEE_TERMS.search(text))
