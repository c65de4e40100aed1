"""Hybrid search over work items.

Two legs run concurrently and are merged by id:

- vector: embed the query and search stored embeddings
- keyword: substring matching of the query and its keywords against title,
  description and vision

Items found by both legs become ``hybrid`` matches, keep the higher of the two
scores and receive a 1.2x boost. A query that is a UUID skips scoring
entirely and returns the item with its direct relations.
"""

import asyncio
import re
import time
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from arborist.core.models import ItemContent, SearchMode, SearchResult, WorkItem
from arborist.interfaces.hierarchy_store import HierarchyStore
from arborist.services.embedding_service import EmbeddingService
from arborist.services.path_resolver import PathResolver
from arborist.services.vector_search import VectorSearchService

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

SEARCH_STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has",
        "he", "in", "is", "it", "its", "of", "on", "that", "the", "to", "was",
        "will", "with", "action", "task", "todo", "work", "add", "create", "make",
    }
)  # fmt: skip

_NON_WORD_RE = re.compile(r"[^\w]")

EXACT_PHRASE_SCORE = 1.0
TITLE_KEYWORD_SCORE = 0.3
OTHER_KEYWORD_SCORE = 0.1
MAX_RELATED_PER_KIND = 5

# (label, score) per relation in the identifier fast path
TARGET = ("TARGET ACTION", 1.0)
DEPENDENT = ("DEPENDS ON TARGET", 0.9)
DEPENDENCY = ("TARGET DEPENDS ON", 0.8)
PARENT = ("PARENT", 0.7)
SIBLING = ("SIBLING", 0.6)
CHILD = ("CHILD", 0.5)


@dataclass
class SearchMetadata:
    vector_matches: int = 0
    keyword_matches: int = 0
    hybrid_matches: int = 0
    processing_time_ms: float = 0.0
    search_time_ms: float = 0.0
    embedding_time_ms: float | None = None
    query_embedding_length: int | None = None


@dataclass
class SearchResponse:
    results: list[SearchResult]
    search_query: str
    search_mode: str
    metadata: SearchMetadata = field(default_factory=SearchMetadata)

    @property
    def total_matches(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_matches": self.total_matches,
            "search_query": self.search_query,
            "search_mode": self.search_mode,
            "metadata": {
                "vector_matches": self.metadata.vector_matches,
                "keyword_matches": self.metadata.keyword_matches,
                "hybrid_matches": self.metadata.hybrid_matches,
                "processing_time_ms": self.metadata.processing_time_ms,
                "search_time_ms": self.metadata.search_time_ms,
                "embedding_time_ms": self.metadata.embedding_time_ms,
                "query_embedding_length": self.metadata.query_embedding_length,
            },
        }


def is_valid_uuid(value: str) -> bool:
    return bool(UUID_RE.match(value))


def extract_search_keywords(query: str, min_length: int = 2) -> list[str]:
    """Lowercased query words stripped of non-word chars, minus filler words."""
    words = (_NON_WORD_RE.sub("", word) for word in query.lower().split())
    return [
        word for word in words if len(word) >= min_length and word not in SEARCH_STOP_WORDS
    ]


def calculate_keyword_score(
    query: str,
    keywords: list[str],
    title: str,
    description: str | None = None,
    vision: str | None = None,
) -> tuple[float, list[str]]:
    """Score one item against a query.

    1.0 if the whole query occurs in the item text, plus 0.3 per keyword found
    in the title or 0.1 per keyword found only in description or vision.

    Returns:
        Tuple of (score, de-duplicated matched terms)
    """
    text = f"{title} {description or ''} {vision or ''}".lower()
    title_lower = title.lower()

    score = 0.0
    matches: list[str] = []

    if query.lower() in text:
        score += EXACT_PHRASE_SCORE
        matches.append(query)

    for keyword in keywords:
        if keyword in text:
            score += TITLE_KEYWORD_SCORE if keyword in title_lower else OTHER_KEYWORD_SCORE
            matches.append(keyword)

    return score, list(dict.fromkeys(matches))


class ActionSearchService:
    """Hybrid (vector + keyword) search over a hierarchy store."""

    def __init__(
        self,
        store: HierarchyStore,
        embedding_service: EmbeddingService,
        vector_search: VectorSearchService,
        path_resolver: PathResolver | None = None,
        hybrid_boost: float = 1.2,
    ):
        """Initialize search service.

        Args:
            store: Hierarchy store scanned by the keyword leg
            embedding_service: Embeds queries for the vector leg
            vector_search: Similarity search over stored embeddings
            path_resolver: Resolves hierarchy paths for results
            hybrid_boost: Score multiplier for items found by both legs
        """
        self._store = store
        self._embedding_service = embedding_service
        self._vector_search = vector_search
        self._path_resolver = path_resolver or PathResolver(store)
        self._hybrid_boost = hybrid_boost

    async def search_actions(
        self,
        query: str,
        limit: int = 20,
        similarity_threshold: float = 0.3,
        include_completed: bool = False,
        search_mode: SearchMode = "hybrid",
        exclude_ids: list[str] | tuple[str, ...] = (),
        min_keyword_length: int = 2,
    ) -> SearchResponse:
        """Search work items.

        Args:
            query: Free text, or an item UUID for the relation fast path
            limit: Maximum results returned
            similarity_threshold: Minimum cosine similarity for vector hits
            include_completed: Include done items in keyword hits
            search_mode: ``vector``, ``keyword`` or ``hybrid``
            exclude_ids: Item ids never returned
            min_keyword_length: Shortest query word used as a keyword

        Returns:
            SearchResponse with ranked results and leg statistics
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")
        if search_mode not in ("vector", "keyword", "hybrid"):
            raise ValueError(f"Unknown search mode: {search_mode}")

        start_time = time.perf_counter()
        logger.debug(f"Starting {search_mode} search for: {query[:50]!r}")

        if is_valid_uuid(query):
            return self._id_based_search(query, limit, start_time)

        exclude_ids = list(exclude_ids or [])
        pool_limit = limit * 2 if search_mode == "hybrid" else limit
        run_vector = search_mode in ("vector", "hybrid")
        run_keyword = search_mode in ("keyword", "hybrid")

        search_start = time.perf_counter()
        vector_outcome, keyword_outcome = await asyncio.gather(
            self._vector_leg(query, pool_limit, similarity_threshold, exclude_ids)
            if run_vector
            else _no_results(),
            self._keyword_leg(
                query, pool_limit, include_completed, exclude_ids, min_keyword_length
            )
            if run_keyword
            else _no_results(),
            return_exceptions=True,
        )
        search_time_ms = (time.perf_counter() - search_start) * 1000

        embedding_time_ms: float | None = None
        if isinstance(vector_outcome, BaseException):
            logger.warning(f"Vector search failed, continuing with keyword results: {vector_outcome}")
            vector_results: list[SearchResult] = []
        else:
            vector_results, embedding_time_ms = vector_outcome

        if isinstance(keyword_outcome, BaseException):
            logger.warning(f"Keyword search failed, continuing with vector results: {keyword_outcome}")
            keyword_results: list[SearchResult] = []
        else:
            keyword_results = keyword_outcome[0]

        combined = self.combine_and_rank_results(
            vector_results, keyword_results, search_mode, limit
        )
        self._add_hierarchy_paths(combined)

        metadata = SearchMetadata(
            vector_matches=len(vector_results),
            keyword_matches=len(keyword_results),
            hybrid_matches=sum(1 for r in combined if r.match_type == "hybrid"),
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
            search_time_ms=search_time_ms,
            embedding_time_ms=embedding_time_ms,
            query_embedding_length=(
                self._embedding_service.provider.dims if vector_results else None
            ),
        )
        logger.debug(
            f"Search completed in {metadata.processing_time_ms:.1f}ms: "
            f"{metadata.vector_matches} vector, {metadata.keyword_matches} keyword, "
            f"{len(combined)} final"
        )

        return SearchResponse(
            results=combined,
            search_query=query,
            search_mode=search_mode,
            metadata=metadata,
        )

    async def _vector_leg(
        self, query: str, limit: int, threshold: float, exclude_ids: list[str]
    ) -> tuple[list[SearchResult], float]:
        embedding_start = time.perf_counter()
        query_embedding = await self._embedding_service.generate_embedding(
            ItemContent(title=query)
        )
        embedding_time_ms = (time.perf_counter() - embedding_start) * 1000

        matches = await self._vector_search.find_similar(
            query_embedding, limit=limit, threshold=threshold, exclude_ids=exclude_ids
        )
        results = [
            SearchResult(
                id=match.id,
                title=match.title or "Untitled",
                description=match.description,
                score=match.similarity,
                similarity=match.similarity,
                match_type="vector",
            )
            for match in matches
        ]
        return results, embedding_time_ms

    async def _keyword_leg(
        self,
        query: str,
        limit: int,
        include_completed: bool,
        exclude_ids: list[str],
        min_keyword_length: int,
    ) -> tuple[list[SearchResult], None]:
        keywords = extract_search_keywords(query, min_keyword_length)
        if not keywords:
            return [], None

        excluded = set(exclude_ids)
        results: list[SearchResult] = []
        for item in self._store.list_items(include_completed=include_completed):
            if item.id in excluded:
                continue
            title = item.title or "Untitled"
            score, matches = calculate_keyword_score(
                query, keywords, title, item.description, item.vision
            )
            if score <= 0:
                continue
            results.append(
                SearchResult(
                    id=item.id,
                    title=title,
                    description=item.description,
                    vision=item.vision,
                    score=score,
                    match_type="keyword",
                    keyword_matches=matches,
                    done=item.done,
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit], None

    def combine_and_rank_results(
        self,
        vector_results: list[SearchResult],
        keyword_results: list[SearchResult],
        search_mode: SearchMode,
        limit: int,
    ) -> list[SearchResult]:
        """Merge legs by id and rank.

        Vector entries are inserted first. A keyword hit on an existing entry
        turns it into a hybrid match scored ``max(vector, keyword) * boost``.
        """
        if search_mode == "vector":
            return vector_results[:limit]
        if search_mode == "keyword":
            return sorted(keyword_results, key=lambda r: r.score, reverse=True)[:limit]

        merged: dict[str, SearchResult] = {}
        for result in vector_results:
            merged[result.id] = result

        for result in keyword_results:
            existing = merged.get(result.id)
            if existing is None:
                merged[result.id] = result
                continue
            merged[result.id] = SearchResult(
                id=existing.id,
                title=existing.title,
                description=existing.description or result.description,
                vision=existing.vision or result.vision,
                score=max(existing.score, result.score) * self._hybrid_boost,
                match_type="hybrid",
                similarity=existing.similarity,
                keyword_matches=result.keyword_matches,
                done=existing.done or result.done,
            )

        ranked = sorted(merged.values(), key=lambda r: r.score, reverse=True)
        return ranked[:limit]

    def _add_hierarchy_paths(self, results: list[SearchResult]) -> None:
        for result in results:
            titles = self._path_resolver.resolve_titles_or_fallback(result.id, result.title)
            resolved = self._store.get_item(result.id) is not None
            result.hierarchy_path = titles
            result.depth = max(0, len(titles) - 1) if resolved else 0

    def _id_based_search(self, item_id: str, limit: int, start_time: float) -> SearchResponse:
        target = self._store.get_item(item_id)
        if target is None:
            return SearchResponse(
                results=[],
                search_query=item_id,
                search_mode="id-based",
                metadata=SearchMetadata(
                    processing_time_ms=(time.perf_counter() - start_time) * 1000
                ),
            )

        results = [_relation_result(target, TARGET)]

        for dependent_id in self._store.dependents_of(item_id):
            if dependent := self._store.get_item(dependent_id):
                results.append(_relation_result(dependent, DEPENDENT))

        for dependency_id in self._store.dependencies_of(item_id):
            if dependency := self._store.get_item(dependency_id):
                results.append(_relation_result(dependency, DEPENDENCY))

        parent_id = self._store.parent_of(item_id)
        if parent_id:
            if parent := self._store.get_item(parent_id):
                results.append(_relation_result(parent, PARENT))

            sibling_ids = [
                sid for sid in self._store.children_of(parent_id) if sid != item_id
            ]
            siblings = [s for s in map(self._store.get_item, sibling_ids) if s]
            results.extend(
                _relation_result(s, SIBLING) for s in siblings[:MAX_RELATED_PER_KIND]
            )

        children = [c for c in map(self._store.get_item, self._store.children_of(item_id)) if c]
        results.extend(_relation_result(c, CHILD) for c in children[:MAX_RELATED_PER_KIND])

        limited = results[:limit]
        self._add_hierarchy_paths(limited)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"ID-based search for {item_id} returned {len(limited)} results")
        return SearchResponse(
            results=limited,
            search_query=item_id,
            search_mode="id-based",
            metadata=SearchMetadata(
                keyword_matches=len(limited),
                processing_time_ms=elapsed_ms,
                search_time_ms=elapsed_ms,
            ),
        )

    async def get_search_suggestions(self, partial_query: str, limit: int = 5) -> list[str]:
        """Titles to suggest while a query is typed (minimum 2 characters)."""
        if len(partial_query) < 2:
            return []

        needle = partial_query.lower()
        suggestions: list[str] = []
        for item in self._store.list_items():
            title = item.title or ""
            title_lower = title.lower()
            description = (item.description or "").lower()
            if not (title_lower.startswith(needle) or needle in description):
                continue
            if needle in title_lower and title not in suggestions:
                suggestions.append(title)
            if len(suggestions) >= limit:
                break
        return suggestions


def _relation_result(item: WorkItem, relation: tuple[str, float]) -> SearchResult:
    label, score = relation
    return SearchResult(
        id=item.id,
        title=item.title or "Untitled",
        description=item.description,
        vision=item.vision,
        score=score,
        match_type="keyword",
        keyword_matches=[label],
        done=item.done,
    )


async def _no_results() -> tuple[list[SearchResult], None]:
    return [], None
