"""VectorStore protocol - nearest-neighbour lookup over item embeddings."""

from typing import Any, Protocol


class VectorStore(Protocol):
    """Abstract protocol for vector similarity stores.

    ``search`` may return rows in any container shape accepted by
    ``normalize_rows`` (list, tuple, ``{"rows": [...]}``, object with a
    ``rows`` attribute, or an iterable cursor). Each row carries ``id``,
    ``title``, ``description``, ``similarity`` and optionally ``done``.
    """

    async def search(
        self,
        vector: list[float],
        limit: int,
        threshold: float,
        exclude_ids: list[str] | None = None,
    ) -> Any:
        """Return open, non-excluded rows with similarity >= threshold, best first."""
        ...

    async def get_embedding(self, item_id: str) -> list[float] | None:
        """Return the stored embedding for an item, or None."""
        ...
