"""Query embeddings using OpenAI text-embedding-3-small."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from openai import OpenAI, OpenAIError

from src.config import settings
from src.retrieval.errors import EmbeddingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddingResult:
    """Either a query vector or the reason one could not be produced.

    An all-zero vector is a legitimate embedding, not a failure marker.
    """

    vector: list[float] | None = None
    error: EmbeddingError | None = None

    @property
    def ok(self) -> bool:
        return self.vector is not None

    @classmethod
    def failure(cls, reason: str) -> EmbeddingResult:
        return cls(error=EmbeddingError(reason))


def embed_query(
    text: str,
    model: str | None = None,
    dimensions: int | None = None,
) -> EmbeddingResult:
    """Embed ``text`` for similarity search.

    The call is bounded by ``settings.embedding_timeout_seconds`` and is not
    retried: any failure is reported in the result so callers can switch to
    keyword search instead.

    Args:
        text: Query text to embed.
        model: OpenAI embedding model name (defaults to settings).
        dimensions: Expected vector length (defaults to settings).

    Returns:
        An EmbeddingResult holding the vector or the error.
    """
    model = model or settings.embedding_model
    dimensions = dimensions or settings.embedding_dimensions
    try:
        client = OpenAI(
            api_key=settings.openai_api_key or None,
            timeout=settings.embedding_timeout_seconds,
            max_retries=0,
        )
        response = client.embeddings.create(input=[text], model=model)
    except OpenAIError as exc:
        logger.warning("Embedding request failed: %s", exc)
        return EmbeddingResult.failure(str(exc))

    if not response.data:
        return EmbeddingResult.failure("Embedding response contained no vectors")
    vector = list(response.data[0].embedding)
    if len(vector) != dimensions:
        return EmbeddingResult.failure(
            f"Expected {dimensions}-dimensional embedding, got {len(vector)}"
        )
    return EmbeddingResult(vector=vector)
