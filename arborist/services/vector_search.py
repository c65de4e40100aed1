"""Vector similarity search over stored work item embeddings.

Wraps a ``VectorStore`` adapter: normalizes whatever container the adapter
returns into flat rows, coerces rows into ``SimilarityMatch`` objects, and
applies threshold, exclusion and completion filters.
"""

from loguru import logger

from arborist.core.exceptions import ResultShapeError
from arborist.core.models import SimilarityMatch
from arborist.core.utils.result_shapes import normalize_rows, row_value
from arborist.interfaces.vector_store import VectorStore


class VectorSearchService:
    """Nearest-neighbour lookup with defensive result handling."""

    def __init__(self, vector_store: VectorStore):
        self._vector_store = vector_store

    async def find_similar(
        self,
        vector: list[float],
        limit: int = 10,
        threshold: float = 0.7,
        exclude_ids: list[str] | None = None,
    ) -> list[SimilarityMatch]:
        """Find stored items similar to ``vector``.

        Adapter exceptions propagate to the caller; an unrecognized result
        shape is logged and treated as no results.

        Args:
            vector: Query embedding
            limit: Maximum matches returned
            threshold: Minimum cosine similarity
            exclude_ids: Item ids never returned

        Returns:
            Matches sorted by similarity, best first (stable on ties)
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")
        if limit == 0:
            return []

        excluded = set(exclude_ids or [])
        raw = await self._vector_store.search(
            vector, limit=limit, threshold=threshold, exclude_ids=list(excluded)
        )

        try:
            rows = normalize_rows(raw)
        except ResultShapeError as e:
            logger.error(f"Unexpected vector store result format: {e}")
            return []

        matches: list[SimilarityMatch] = []
        for row in rows:
            match = _to_match(row)
            if match is None:
                continue
            if match.id in excluded or match.similarity < threshold:
                continue
            if row_value(row, "done", False):
                continue
            matches.append(match)

        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:limit]

    async def get_embedding(self, item_id: str) -> list[float] | None:
        """Stored embedding for an item, or None if missing or the lookup fails."""
        try:
            return await self._vector_store.get_embedding(item_id)
        except Exception as e:
            logger.warning(f"Failed to fetch embedding for {item_id}: {e}")
            return None


def _to_match(row: object) -> SimilarityMatch | None:
    item_id = row_value(row, "id")
    similarity = row_value(row, "similarity")
    if item_id is None or similarity is None:
        logger.warning(f"Skipping malformed vector row: {row!r}")
        return None

    try:
        score = float(similarity)
    except (TypeError, ValueError):
        logger.warning(f"Skipping vector row with non-numeric similarity: {row!r}")
        return None
    if score != score:  # NaN
        return None

    return SimilarityMatch(
        id=str(item_id),
        title=row_value(row, "title") or "",
        description=row_value(row, "description"),
        similarity=score,
    )
