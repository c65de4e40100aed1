"""Search defaults for the hybrid retrieval orchestrator."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchConfig(BaseSettings):
    """Search configuration (ARBORIST_SEARCH_*)."""

    model_config = SettingsConfigDict(
        env_prefix="ARBORIST_SEARCH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    limit: int = Field(default=20, gt=0, description="Maximum results returned")
    similarity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    search_mode: Literal["vector", "keyword", "hybrid"] = Field(default="hybrid")
    min_keyword_length: int = Field(default=2, ge=1)
    include_completed: bool = Field(default=False)
    hybrid_boost: float = Field(
        default=1.2, ge=1.0, description="Score multiplier for results found by both legs"
    )
