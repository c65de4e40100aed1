"""Shared utilities for embedding providers."""

from typing import Any

from arborist.core.exceptions import EmbeddingDimensionError, EmbeddingProviderError


def validate_text_input(texts: list[str]) -> list[str]:
    """Validate and strip texts before embedding.

    Unlike a filtering step this keeps positions stable, so every input text
    must be non-empty after stripping.
    """
    validated = []
    for index, text in enumerate(texts):
        if not isinstance(text, str):
            raise ValueError(f"Text must be string, got {type(text)}")
        if not text.strip():
            raise EmbeddingProviderError(f"Cannot embed empty text at position {index}")
        validated.append(text.strip())
    return validated


def validate_dimensions(embeddings: list[list[float]], expected_dims: int) -> None:
    """Raise EmbeddingDimensionError if any vector has the wrong length."""
    for index, vector in enumerate(embeddings):
        if len(vector) != expected_dims:
            raise EmbeddingDimensionError(
                f"Embedding {index} has {len(vector)} dimensions, expected {expected_dims}"
            )


def get_usage_stats_dict(
    requests_made: int, tokens_used: int, embeddings_generated: int
) -> dict[str, Any]:
    """Get standardized usage statistics dictionary."""
    return {
        "requests_made": requests_made,
        "tokens_used": tokens_used,
        "embeddings_generated": embeddings_generated,
    }
