"""Claude-powered answer generation over assembled context."""

from __future__ import annotations

import re
from typing import Any

from anthropic import Anthropic
from anthropic.types import TextBlock

from src.config import settings

SUGGESTIONS_MARKER = "---SUGGESTIONS---"
_SUGGESTIONS_RE = re.compile(rf"{re.escape(SUGGESTIONS_MARKER)}\s*([\s\S]*)$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^[-•*]\s*")

SYSTEM_PROMPT = (
    "You are an assistant that answers questions about meeting transcripts, "
    "tasks, and documents.\n\n"
    "Rules:\n"
    "- Only use the information in the provided context.\n"
    "- Never invent content that is not in the context.\n"
    "- If the answer isn't in the context, say you couldn't find it.\n"
    "- Answer in the language of the question, concisely.\n"
    "- Mention sources (meeting title, date) when possible.\n\n"
    f"After the answer, always add a line '{SUGGESTIONS_MARKER}' followed by "
    "2-3 follow-up questions, one per line, each starting with '- '."
)


def split_suggestions(text: str, limit: int = 3) -> tuple[str, list[str]]:
    """Separate the trailing follow-up question block from an answer."""
    match = _SUGGESTIONS_RE.search(text)
    if not match:
        return text.strip(), []
    suggestions = [
        _BULLET_RE.sub("", line).strip() for line in match.group(1).splitlines()
    ]
    answer = text[: match.start()].strip()
    return answer, [s for s in suggestions if s][:limit]


def generate_answer(question: str, context: str) -> dict[str, Any]:
    """Generate an answer using Claude.

    Args:
        question: The user's question.
        context: Assembled retrieval context.

    Returns:
        Dictionary with answer, suggestions, model, and usage info.
    """
    client = Anthropic(api_key=settings.anthropic_api_key)
    response = client.messages.create(
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        system=SYSTEM_PROMPT,
        messages=[
            {
                "role": "user",
                "content": f"Retrieved context:\n\n{context}\n\nQuestion: {question}",
            }
        ],
    )

    # response.content[0] is a union of block types; plain text is always requested.
    block = response.content[0]
    if not isinstance(block, TextBlock):
        raise ValueError(f"Expected TextBlock from Claude, got {type(block).__name__}")

    answer, suggestions = split_suggestions(block.text)
    return {
        "answer": answer,
        "suggestions": suggestions,
        "model": response.model,
        "usage": {
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
        },
    }
