"""Adapter protocols consumed by the Arborist services."""

from .classification_oracle import ClassificationOracle
from .embedding_provider import EmbeddingProvider
from .hierarchy_store import HierarchyStore
from .vector_store import VectorStore

__all__ = [
    "ClassificationOracle",
    "EmbeddingProvider",
    "HierarchyStore",
    "VectorStore",
]
