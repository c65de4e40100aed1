"""Vector-based placement candidate ranking.

Embeds a new item, pulls a widened pool of similar existing items, and infers
"family" candidates: parents that several similar items share. Families are
scored from how often they occur in the pool, how similar their children are,
and how similar the parent itself is to the query. Highly similar items whose
parent is not already a family candidate are returned as siblings.
"""

import asyncio
import math
import time
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from arborist.core.models import Candidate, ItemContent, SimilarityMatch
from arborist.core.utils.vector_math import cosine_similarity
from arborist.interfaces.hierarchy_store import HierarchyStore
from arborist.services.embedding_service import EmbeddingService
from arborist.services.path_resolver import build_path_from_map
from arborist.services.vector_search import VectorSearchService

MIN_FAMILY_FREQUENCY = 2
FREQUENCY_WEIGHT = 0.3
CHILD_SIMILARITY_WEIGHT = 0.4
DIRECT_SIMILARITY_WEIGHT = 0.3


@dataclass
class VectorPlacementResult:
    candidates: list[Candidate] = field(default_factory=list)
    query_embedding: list[float] = field(default_factory=list)
    total_processing_time_ms: float = 0.0
    search_time_ms: float = 0.0
    embedding_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "total_processing_time_ms": self.total_processing_time_ms,
            "search_time_ms": self.search_time_ms,
            "embedding_time_ms": self.embedding_time_ms,
        }


class VectorPlacementService:
    """Ranks existing items as placement candidates for a new item."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_search: VectorSearchService,
        store: HierarchyStore,
        min_pool_size: int = 30,
        threshold_relaxation: float = 0.2,
        relaxed_floor: float = 0.3,
        family_share: float = 0.6,
    ):
        """Initialize the ranker.

        Args:
            embedding_service: Embeds the query item
            vector_search: Similarity search over stored items
            store: Hierarchy store providing items and parent links
            min_pool_size: Minimum number of similar items pulled for analysis
            threshold_relaxation: Pool threshold is the requested threshold minus this
            relaxed_floor: Lowest pool threshold allowed
            family_share: Share of the result limit reserved for families
        """
        self._embedding_service = embedding_service
        self._vector_search = vector_search
        self._store = store
        self._min_pool_size = min_pool_size
        self._threshold_relaxation = threshold_relaxation
        self._relaxed_floor = relaxed_floor
        self._family_share = family_share

    async def find_vector_family_suggestions(
        self,
        item: ItemContent,
        limit: int = 15,
        similarity_threshold: float = 0.5,
        exclude_ids: list[str] | None = None,
        include_hierarchy_paths: bool = True,
    ) -> VectorPlacementResult:
        """Find family and sibling placement candidates for ``item``.

        Embedding or vector store failures are logged and produce an empty
        candidate list.

        Args:
            item: Content of the item being placed
            limit: Maximum candidates returned
            similarity_threshold: Minimum similarity for sibling candidates
            exclude_ids: Item ids never returned
            include_hierarchy_paths: When False, return the raw pool as plain
                candidates with single-element paths

        Returns:
            VectorPlacementResult with candidates and timings
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")

        start_time = time.perf_counter()
        result = VectorPlacementResult()

        embedding_start = time.perf_counter()
        try:
            query_embedding = await self._embedding_service.generate_embedding(item)
        except Exception as e:
            logger.warning(f"Embedding generation failed during placement: {e}")
            result.total_processing_time_ms = _elapsed_ms(start_time)
            return result
        result.embedding_time_ms = _elapsed_ms(embedding_start)
        result.query_embedding = query_embedding

        pool_limit = max(self._min_pool_size, limit * 3)
        pool_threshold = max(
            self._relaxed_floor, similarity_threshold - self._threshold_relaxation
        )

        search_start = time.perf_counter()
        try:
            pool = await self._vector_search.find_similar(
                query_embedding,
                limit=pool_limit,
                threshold=pool_threshold,
                exclude_ids=exclude_ids,
            )
        except Exception as e:
            logger.warning(f"Vector search failed during placement: {e}")
            pool = []
        result.search_time_ms = _elapsed_ms(search_start)

        if include_hierarchy_paths and pool:
            result.candidates = await self._rank_families(
                query_embedding, pool, limit, similarity_threshold
            )
        else:
            result.candidates = [
                Candidate(
                    id=match.id,
                    title=match.title,
                    description=match.description,
                    similarity=match.similarity,
                    hierarchy_path=[match.title],
                    depth=1,
                )
                for match in pool[:limit]
            ]

        result.total_processing_time_ms = _elapsed_ms(start_time)
        return result

    async def _rank_families(
        self,
        query_embedding: list[float],
        pool: list[SimilarityMatch],
        limit: int,
        similarity_threshold: float,
    ) -> list[Candidate]:
        items_by_id = {item.id: item for item in self._store.list_items()}
        parent_map = self._store.parent_map()

        parent_frequency: dict[str, int] = {}
        child_similarities: dict[str, list[float]] = {}
        for match in pool:
            parent_id = parent_map.get(match.id)
            if parent_id:
                parent_frequency[parent_id] = parent_frequency.get(parent_id, 0) + 1
                child_similarities.setdefault(parent_id, []).append(match.similarity)

        qualifying = [
            parent_id
            for parent_id, frequency in parent_frequency.items()
            if frequency >= MIN_FAMILY_FREQUENCY and parent_id in items_by_id
        ]

        direct_embeddings = await asyncio.gather(
            *(self._vector_search.get_embedding(parent_id) for parent_id in qualifying)
        )

        frequency_denominator = min(10, len(pool))
        families: list[Candidate] = []
        for parent_id, parent_embedding in zip(qualifying, direct_embeddings):
            parent = items_by_id[parent_id]
            similarities = child_similarities[parent_id]
            avg_child_similarity = sum(similarities) / len(similarities)

            direct_similarity = 0.0
            if parent_embedding and len(parent_embedding) == len(query_embedding):
                direct_similarity = cosine_similarity(query_embedding, parent_embedding)

            score = (
                parent_frequency[parent_id] / frequency_denominator * FREQUENCY_WEIGHT
                + avg_child_similarity * CHILD_SIMILARITY_WEIGHT
                + direct_similarity * DIRECT_SIMILARITY_WEIGHT
            )

            path = build_path_from_map(parent_id, items_by_id, parent_map)
            families.append(
                Candidate(
                    id=parent_id,
                    title=parent.title or "Untitled",
                    description=parent.description,
                    similarity=score,
                    hierarchy_path=path,
                    depth=len(path),
                )
            )

        families.sort(key=lambda c: c.similarity, reverse=True)
        family_ids = {c.id for c in families}

        siblings: list[Candidate] = []
        for match in pool:
            if match.id in family_ids or parent_map.get(match.id) in family_ids:
                continue
            if match.similarity >= similarity_threshold:
                path = build_path_from_map(match.id, items_by_id, parent_map)
                siblings.append(
                    Candidate(
                        id=match.id,
                        title=match.title,
                        description=match.description,
                        similarity=match.similarity,
                        hierarchy_path=path,
                        depth=len(path),
                    )
                )

        logger.debug(
            f"Placement pool: {len(pool)} similar items, {len(parent_frequency)} "
            f"unique parents, {len(families)} families, {len(siblings)} siblings"
        )

        # round() strips float noise before ceil/floor
        family_slots = math.ceil(round(limit * self._family_share, 9))
        sibling_slots = math.floor(round(limit * (1 - self._family_share), 9))
        return (families[:family_slots] + siblings[:sibling_slots])[:limit]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
