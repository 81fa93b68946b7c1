from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_timeout_seconds: float = 10.0
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 1800

    # Retrieval
    transcript_similarity_floor: float = 0.65
    document_similarity_floor: float = 0.35
    keyword_proxy_similarity: float = 0.6
    keyword_match_mode: Literal["any", "all"] = "any"
    transcript_match_count: int = 15
    keyword_match_count: int = 10
    document_match_count: int = 10
    action_item_match_count: int = 30
    snippet_length: int = 300

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
