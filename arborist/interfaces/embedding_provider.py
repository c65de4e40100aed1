"""EmbeddingProvider protocol - interface for text embedding backends."""

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Abstract protocol for embedding providers.

    Implementations turn text into fixed-dimension vectors. Failures raise
    ``EmbeddingProviderError`` (or a subclass).
    """

    @property
    def name(self) -> str:
        """Provider name."""
        ...

    @property
    def model(self) -> str:
        """Model name."""
        ...

    @property
    def dims(self) -> int:
        """Embedding dimensions."""
        ...

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts, preserving order."""
        ...

    async def embed_batch(
        self, texts: list[str], batch_size: int | None = None
    ) -> list[list[float]]:
        """Generate embeddings in batches, preserving order."""
        ...
