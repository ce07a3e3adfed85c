"""
Engine configuration and environment settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Server settings
    app_name: str = "Legal Compass RAG API"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # LLM settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    llm_model: str = "gemini-2.5-flash-lite"
    router_model: str | None = None  # falls back to llm_model
    llm_timeout: float = 120.0
    router_timeout: float = 20.0

    # Index and model settings
    index_dir: Path = Path("./data/vector_store")
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Retrieval
    top_k: int = 5
    distance_threshold: float = 0.45
    max_context_hits: int = 4

    # Response cache
    cache_max_entries: int = 512
    cache_ttl_seconds: int = 3600

    # Conversation memory
    session_max_age_hours: int = 24
    history_messages: int = 6
    strict_sessions: bool = False

    # Routing stages
    enable_simple_route: bool = True
    enable_model_router: bool = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
