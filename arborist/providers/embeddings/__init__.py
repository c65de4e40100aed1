"""Embedding providers package for Arborist - concrete embedding implementations."""

from arborist.core.config.embedding_config import EmbeddingConfig
from arborist.interfaces.embedding_provider import EmbeddingProvider

from .disabled_provider import DisabledEmbeddingProvider
from .openai_provider import OpenAIEmbeddingProvider


def create_embedding_provider(config: EmbeddingConfig) -> EmbeddingProvider:
    """Build the embedding provider selected by ``config.provider``."""
    if config.provider == "disabled":
        return DisabledEmbeddingProvider(dims=config.dims)
    return OpenAIEmbeddingProvider(**config.get_provider_config())


__all__ = [
    "DisabledEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
]
