from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="CITEGRAPH_"
    )

    # ------------------------------------------------------------------
    # Corpus
    # ------------------------------------------------------------------
    DATA_FILE: Optional[Path] = Field(
        default=None,
        description=(
            "JSON corpus to load at startup. If None, ./data.json is tried."
        ),
    )

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    HOST: str = Field(
        default="127.0.0.1",
        description="Interface the web server binds to.",
    )

    PORT: int = Field(
        default=8080,
        description="Port the web server listens on.",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level for the web server and CLI.",
    )

    # ------------------------------------------------------------------
    # Query / analytics knobs
    # ------------------------------------------------------------------
    SEARCH_MIN_QUERY_LENGTH: int = Field(
        default=2,
        description="Queries shorter than this return no search results.",
    )

    SEARCH_LIMIT: int = Field(
        default=20,
        description="Maximum number of search hits returned.",
    )

    BETWEENNESS_TOP_N: int = Field(
        default=10,
        description="How many top-ranked papers a betweenness response lists.",
    )

    MAX_VISIBLE_FOR_BETWEENNESS: Optional[int] = Field(
        default=None,
        description=(
            "Refuse betweenness when more papers than this are visible. "
            "Brandes is O(V * E); None disables the cap."
        ),
    )

    # ------------------------------------------------------------------
    # Convenience derived paths
    # ------------------------------------------------------------------
    @property
    def default_data_file(self) -> Path:
        return Path("data.json")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Singleton-style accessor so we only construct Settings once.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
