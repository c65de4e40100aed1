"""Placement tuning: ranker pool sizing, thresholds and suggestion limits."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from arborist.core.constants import DEFAULT_MAX_PATH_DEPTH


class PlacementConfig(BaseSettings):
    """Placement configuration (ARBORIST_PLACEMENT_*)."""

    model_config = SettingsConfigDict(
        env_prefix="ARBORIST_PLACEMENT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    suggestion_limit: int = Field(default=5, gt=0)
    confidence_threshold: int = Field(
        default=40, ge=0, le=100, description="Minimum suggestion confidence (0-100)"
    )
    include_create_new: bool = Field(default=True)

    min_pool_size: int = Field(
        default=30, gt=0, description="Minimum vector pool size for the ranker"
    )
    suggestion_similarity_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Sibling threshold used when suggesting parents"
    )
    threshold_relaxation: float = Field(
        default=0.2, ge=0.0, le=1.0, description="Pool threshold = threshold - relaxation"
    )
    relaxed_floor: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Lowest allowed pool threshold"
    )
    family_share: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Share of results reserved for families"
    )

    oracle_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    max_path_depth: int = Field(default=DEFAULT_MAX_PATH_DEPTH, gt=0)

    @property
    def sibling_share(self) -> float:
        return 1.0 - self.family_share

    @model_validator(mode="after")
    def validate_floor(self) -> Self:
        """The relaxed floor cannot exceed the suggestion threshold."""
        if self.relaxed_floor > self.suggestion_similarity_threshold:
            raise ValueError(
                "relaxed_floor must not exceed suggestion_similarity_threshold"
            )
        return self
