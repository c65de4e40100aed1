"""Storage adapters for Arborist."""

from .memory_provider import InMemoryWorkItemStore

__all__ = ["InMemoryWorkItemStore"]
