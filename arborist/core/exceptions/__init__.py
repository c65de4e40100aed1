"""Exception hierarchy for Arborist adapters and services.

Adapters (embedding providers, vector stores, classification oracles)
raise these typed exceptions. Services catch them at the call boundary and
degrade to valid-but-empty results; they never reach service callers.
"""


class ArboristError(Exception):
    """Base exception for Arborist errors."""

    pass


class EmbeddingProviderError(ArboristError):
    """Raised when an embedding provider fails to produce vectors."""

    pass


class EmbeddingDimensionError(EmbeddingProviderError):
    """Raised when embedding dimension doesn't match expected value.

    This occurs when:
    - API returns embeddings with unexpected dimension
    - A batch contains vectors of different lengths
    """

    pass


class ClassificationError(ArboristError):
    """Raised when the classification oracle fails or returns invalid output."""

    pass


class VectorStoreError(ArboristError):
    """Raised when the vector store search or lookup fails."""

    pass


class ResultShapeError(ArboristError):
    """Raised when an adapter result container cannot be normalized to rows."""

    pass


class ItemNotFoundError(ArboristError):
    """Raised when a work item id cannot be resolved in the hierarchy store."""

    def __init__(self, item_id: str):
        super().__init__(f"Work item with ID {item_id} not found")
        self.item_id = item_id


__all__ = [
    "ArboristError",
    "ClassificationError",
    "EmbeddingDimensionError",
    "EmbeddingProviderError",
    "ItemNotFoundError",
    "ResultShapeError",
    "VectorStoreError",
]
