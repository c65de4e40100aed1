"""In-memory work item store.

Implements both ``HierarchyStore`` and ``VectorStore`` over a snapshot held
in process memory. Vector search is brute-force cosine similarity with numpy,
which is adequate for the snapshot sizes the CLI and tests work with.
"""

from typing import Any

import numpy as np
from loguru import logger

from arborist.core.exceptions import VectorStoreError
from arborist.core.models import WorkItem


class InMemoryWorkItemStore:
    """Snapshot-backed hierarchy and vector store."""

    def __init__(self, items: list[WorkItem] | None = None):
        self._items: dict[str, WorkItem] = {}
        self._children: dict[str, list[str]] = {}
        # source -> targets it depends on
        self._dependencies: dict[str, list[str]] = {}
        self._dependents: dict[str, list[str]] = {}

        for item in items or []:
            self.add_item(item)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryWorkItemStore":
        """Build a store from ``{"items": [...], "dependencies": [[src, dst], ...]}``.

        Raises:
            ValueError: If the snapshot is malformed
        """
        raw_items = data.get("items")
        if not isinstance(raw_items, list):
            raise ValueError("Snapshot must contain an 'items' list")

        store = cls([WorkItem.from_dict(raw) for raw in raw_items])

        for pair in data.get("dependencies", []) or []:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"Dependency must be a [source, target] pair: {pair!r}")
            store.add_dependency(str(pair[0]), str(pair[1]))

        return store

    def add_item(self, item: WorkItem) -> None:
        """Insert or replace an item."""
        existing = self._items.get(item.id)
        if existing is not None and existing.parent_id:
            siblings = self._children.get(existing.parent_id, [])
            if item.id in siblings:
                siblings.remove(item.id)

        self._items[item.id] = item
        if item.parent_id:
            self._children.setdefault(item.parent_id, []).append(item.id)

    def add_dependency(self, source_id: str, target_id: str) -> None:
        """Record that ``source_id`` depends on ``target_id``."""
        deps = self._dependencies.setdefault(source_id, [])
        if target_id not in deps:
            deps.append(target_id)
            self._dependents.setdefault(target_id, []).append(source_id)

    # HierarchyStore

    def get_item(self, item_id: str) -> WorkItem | None:
        return self._items.get(item_id)

    def list_items(self, include_completed: bool = True) -> list[WorkItem]:
        if include_completed:
            return list(self._items.values())
        return [item for item in self._items.values() if not item.done]

    def parent_of(self, item_id: str) -> str | None:
        item = self._items.get(item_id)
        return item.parent_id if item else None

    def children_of(self, item_id: str) -> list[str]:
        return list(self._children.get(item_id, []))

    def dependents_of(self, item_id: str) -> list[str]:
        return list(self._dependents.get(item_id, []))

    def dependencies_of(self, item_id: str) -> list[str]:
        return list(self._dependencies.get(item_id, []))

    def parent_map(self) -> dict[str, str]:
        return {
            item.id: item.parent_id
            for item in self._items.values()
            if item.parent_id
        }

    # VectorStore

    async def search(
        self,
        vector: list[float],
        limit: int,
        threshold: float,
        exclude_ids: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Brute-force cosine search over open items that carry embeddings.

        Raises:
            VectorStoreError: If the query dimension differs from stored vectors
        """
        excluded = set(exclude_ids or [])
        candidates = [
            item
            for item in self._items.values()
            if item.embedding is not None and not item.done and item.id not in excluded
        ]
        if not candidates or limit <= 0:
            return []

        query = np.asarray(vector, dtype=np.float64)
        try:
            matrix = np.asarray([item.embedding for item in candidates], dtype=np.float64)
        except ValueError as e:
            raise VectorStoreError(f"Stored embeddings have inconsistent dimensions: {e}") from e

        if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
            raise VectorStoreError(
                f"Query dimension {query.shape[0]} does not match stored dimension "
                f"{matrix.shape[1] if matrix.ndim == 2 else 'unknown'}"
            )

        query_norm = np.linalg.norm(query)
        row_norms = np.linalg.norm(matrix, axis=1)
        denominator = row_norms * query_norm
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = np.where(denominator > 0, matrix @ query / denominator, 0.0)

        # Stable sort keeps insertion order between equal scores
        order = np.argsort(-scores, kind="stable")
        rows = []
        for index in order:
            similarity = float(scores[index])
            if similarity < threshold:
                break
            item = candidates[index]
            rows.append(
                {
                    "id": item.id,
                    "title": item.title,
                    "description": item.description,
                    "similarity": similarity,
                    "done": item.done,
                }
            )
            if len(rows) >= limit:
                break

        logger.debug(f"In-memory vector search returned {len(rows)} rows")
        return rows

    async def get_embedding(self, item_id: str) -> list[float] | None:
        item = self._items.get(item_id)
        return list(item.embedding) if item and item.embedding is not None else None

    def __len__(self) -> int:
        return len(self._items)
