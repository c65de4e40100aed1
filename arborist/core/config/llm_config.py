"""
LLM configuration for the placement classifier.

The classifier is an external oracle; this config selects and tunes the
OpenAI-compatible chat model used to produce placement decisions.
"""

from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arborist.core.constants import OPENAI_DEFAULT_CLASSIFICATION_MODEL


class LLMConfig(BaseSettings):
    """
    Classification model configuration.

    Environment Variables:
        ARBORIST_LLM_API_KEY=sk-...
        ARBORIST_LLM_MODEL=gpt-4o-mini
        ARBORIST_LLM_BASE_URL=http://localhost:11434/v1
    """

    model_config = SettingsConfigDict(
        env_prefix="ARBORIST_LLM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    provider: Literal["openai"] = Field(
        default="openai", description="LLM provider (OpenAI-compatible APIs)"
    )

    model: str = Field(
        default=OPENAI_DEFAULT_CLASSIFICATION_MODEL,
        description="Chat model used for classification",
    )

    api_key: SecretStr | None = Field(default=None, description="API key")

    base_url: str | None = Field(default=None, description="Base URL for the LLM API")

    timeout: int = Field(default=60, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Max retries per request")
    max_completion_tokens: int = Field(
        default=1024, gt=0, description="Maximum tokens generated per decision"
    )

    @field_validator("base_url")
    def validate_base_url(cls, v: str | None) -> str | None:  # noqa: N805
        """Validate and normalize base URL."""
        if v is None:
            return v

        v = v.rstrip("/")
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    def get_provider_config(self) -> dict[str, Any]:
        """Keyword arguments for the classification oracle constructor."""
        config: dict[str, Any] = {
            "model": self.model,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "max_completion_tokens": self.max_completion_tokens,
        }
        if self.api_key:
            config["api_key"] = self.api_key.get_secret_value()
        if self.base_url:
            config["base_url"] = self.base_url
        return config

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        api_key_display = "***" if self.api_key else None
        return (
            f"LLMConfig(provider={self.provider}, model={self.model}, "
            f"api_key={api_key_display}, base_url={self.base_url})"
        )
