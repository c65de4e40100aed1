"""Embedding service for Arborist - turns work item content into vectors."""

from loguru import logger

from arborist.core.exceptions import EmbeddingDimensionError, EmbeddingProviderError
from arborist.core.models import ItemContent
from arborist.interfaces.embedding_provider import EmbeddingProvider


def prepare_text_for_embedding(item: ItemContent) -> str:
    """Combine title, description and vision into one embedding input.

    The title always comes first. Vision is only included when it differs
    from the description, prefixed with ``"Vision: "``.
    """
    item = ItemContent.of(item)
    parts = [item.title]

    if item.description and item.description.strip():
        parts.append(item.description.strip())

    if item.vision and item.vision.strip() and item.vision != item.description:
        parts.append(f"Vision: {item.vision.strip()}")

    return "\n\n".join(parts)


class EmbeddingService:
    """Service for generating embeddings of work item content."""

    def __init__(self, embedding_provider: EmbeddingProvider):
        """Initialize embedding service.

        Args:
            embedding_provider: Provider used for vector generation
        """
        self._embedding_provider = embedding_provider

    @property
    def provider(self) -> EmbeddingProvider:
        return self._embedding_provider

    async def generate_embedding(self, item: ItemContent) -> list[float]:
        """Embed a single item.

        Raises:
            EmbeddingProviderError: If the provider fails or returns no vector
            EmbeddingDimensionError: If the vector length differs from ``provider.dims``
        """
        embeddings = await self.generate_batch_embeddings([item])
        if not embeddings:
            raise EmbeddingProviderError("Embedding provider returned no vector")
        return embeddings[0]

    async def generate_batch_embeddings(self, items: list[ItemContent]) -> list[list[float]]:
        """Embed several items, preserving input order."""
        if not items:
            return []

        texts = [prepare_text_for_embedding(item) for item in items]
        logger.debug(
            f"Generating {len(texts)} embeddings with {self._embedding_provider.name}"
        )
        embeddings = await self._embedding_provider.embed_batch(texts)

        if len(embeddings) != len(texts):
            raise EmbeddingProviderError(
                f"Expected {len(texts)} embeddings, got {len(embeddings)}"
            )

        expected_dims = self._embedding_provider.dims
        for vector in embeddings:
            if len(vector) != expected_dims:
                raise EmbeddingDimensionError(
                    f"Embedding has {len(vector)} dimensions, expected {expected_dims}"
                )

        return embeddings
