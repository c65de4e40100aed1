"""
Embedding configuration for Arborist.

Supports environment variables, config files and CLI arguments. The
``disabled`` provider is the explicit "no real embedding calls" mode used for
offline runs and tests: it yields zero vectors of the configured dimension.
"""

import argparse
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arborist.core.constants import (
    OPENAI_DEFAULT_EMBEDDING_DIMS,
    OPENAI_DEFAULT_EMBEDDING_MODEL,
)


class EmbeddingConfig(BaseSettings):
    """
    Embedding provider configuration.

    Configuration Sources (in order of precedence):
    1. CLI arguments
    2. Config file (passed as init kwargs)
    3. Environment variables (ARBORIST_EMBEDDING_*)
    4. Default values

    Environment Variables:
        ARBORIST_EMBEDDING_API_KEY=sk-...
        ARBORIST_EMBEDDING_MODEL=text-embedding-3-small
        ARBORIST_EMBEDDING_PROVIDER=disabled
    """

    model_config = SettingsConfigDict(
        env_prefix="ARBORIST_EMBEDDING_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    provider: Literal["openai", "disabled"] = Field(
        default="openai", description="Embedding provider (openai, disabled)"
    )

    model: str = Field(
        default=OPENAI_DEFAULT_EMBEDDING_MODEL, description="Embedding model name"
    )

    api_key: SecretStr | None = Field(
        default=None, description="API key for authentication"
    )

    base_url: str | None = Field(
        default=None, description="Base URL for the embedding API"
    )

    dims: int = Field(
        default=OPENAI_DEFAULT_EMBEDDING_DIMS, gt=0, description="Embedding dimensions"
    )

    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Max retries per request")

    @field_validator("model")
    def validate_model(cls, v: str) -> str:  # noqa: N805
        """Fix common model name typos."""
        typo_fixes = {
            "text-embedding-small": "text-embedding-3-small",
            "text-embedding-large": "text-embedding-3-large",
        }
        return typo_fixes.get(v, v)

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
        """
        Get provider-specific configuration dictionary.

        Returns:
            Dictionary containing configuration parameters for the selected provider
        """
        config: dict[str, Any] = {
            "model": self.model,
            "dims": self.dims,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }
        if self.api_key:
            config["api_key"] = self.api_key.get_secret_value()
        if self.base_url:
            config["base_url"] = self.base_url
        return config

    def is_provider_configured(self) -> bool:
        """Check if the selected provider can make calls."""
        if self.provider == "disabled":
            return True
        # Custom OpenAI-compatible endpoints may not need a key
        return self.api_key is not None or self.base_url is not None

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add embedding-related CLI arguments."""
        parser.add_argument(
            "--embedding-model",
            help=f"Embedding model (default: {OPENAI_DEFAULT_EMBEDDING_MODEL})",
        )
        parser.add_argument(
            "--embedding-base-url",
            help="Base URL for embedding API (uses env var if not specified)",
        )
        parser.add_argument(
            "--no-embeddings",
            action="store_true",
            help="Disable embedding calls (vector legs return nothing useful)",
        )

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract embedding overrides from parsed CLI arguments."""
        overrides: dict[str, Any] = {}
        if getattr(args, "embedding_model", None):
            overrides["model"] = args.embedding_model
        if getattr(args, "embedding_base_url", None):
            overrides["base_url"] = args.embedding_base_url
        if getattr(args, "no_embeddings", False):
            overrides["provider"] = "disabled"
        return overrides

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        api_key_display = "***" if self.api_key else None
        return (
            f"EmbeddingConfig("
            f"provider={self.provider}, "
            f"model={self.model}, "
            f"dims={self.dims}, "
            f"api_key={api_key_display}, "
            f"base_url={self.base_url})"
        )
