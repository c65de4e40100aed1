"""OpenAI embedding provider - text embeddings through the OpenAI API."""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from arborist.core.constants import (
    OPENAI_DEFAULT_EMBEDDING_DIMS,
    OPENAI_DEFAULT_EMBEDDING_MODEL,
)
from arborist.core.exceptions import EmbeddingDimensionError, EmbeddingProviderError

from .shared_utils import get_usage_stats_dict, validate_dimensions, validate_text_input


class OpenAIEmbeddingProvider:
    """Embedding provider backed by ``AsyncOpenAI.embeddings.create``.

    Works with any OpenAI-compatible endpoint via ``base_url``. Retries and
    timeouts are delegated to the OpenAI client.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str = OPENAI_DEFAULT_EMBEDDING_MODEL,
        dims: int = OPENAI_DEFAULT_EMBEDDING_DIMS,
        batch_size: int = 100,
        timeout: int = 30,
        max_retries: int = 3,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI embedding provider.

        Args:
            api_key: API key (defaults to OPENAI_API_KEY in the client)
            base_url: Base URL for OpenAI-compatible endpoints
            model: Embedding model name
            dims: Expected embedding dimensions
            batch_size: Maximum texts per API request
            timeout: Request timeout in seconds
            max_retries: Retry attempts handled by the client
            client: Pre-built client (used by tests)
        """
        self._model = model
        self._dims = dims
        self._batch_size = batch_size
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

        self._requests_made = 0
        self._tokens_used = 0
        self._embeddings_generated = 0

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    @property
    def dims(self) -> int:
        return self._dims

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts."""
        return await self.embed_batch(texts)

    async def embed_batch(
        self, texts: list[str], batch_size: int | None = None
    ) -> list[list[float]]:
        """Generate embeddings in batches, preserving input order."""
        if not texts:
            return []

        texts = validate_text_input(texts)

        effective_batch_size = batch_size or self._batch_size
        all_embeddings: list[list[float]] = []

        for i in range(0, len(texts), effective_batch_size):
            batch = texts[i : i + effective_batch_size]
            all_embeddings.extend(await self._embed_batch_internal(batch))

        return all_embeddings

    async def _embed_batch_internal(self, texts: list[str]) -> list[list[float]]:
        logger.debug(f"Generating embeddings for {len(texts)} texts")
        try:
            response = await self._client.embeddings.create(
                model=self._model,
                input=texts,
                dimensions=self._dims,
            )
        except Exception as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise EmbeddingProviderError(f"OpenAI embedding request failed: {e}") from e

        # Responses carry an index; order by it rather than trusting list order
        ordered = sorted(response.data, key=lambda d: d.index)
        embeddings = [list(d.embedding) for d in ordered]

        if len(embeddings) != len(texts):
            raise EmbeddingProviderError(
                f"Expected {len(texts)} embeddings, got {len(embeddings)}"
            )
        try:
            validate_dimensions(embeddings, self._dims)
        except EmbeddingDimensionError:
            logger.error(f"Unexpected embedding dimensions from {self._model}")
            raise

        self._requests_made += 1
        self._embeddings_generated += len(embeddings)
        if response.usage:
            self._tokens_used += response.usage.total_tokens

        return embeddings

    def get_usage_stats(self) -> dict[str, Any]:
        return get_usage_stats_dict(
            self._requests_made, self._tokens_used, self._embeddings_generated
        )
