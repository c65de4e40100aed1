"""Hierarchy path resolution for work items.

Walks parent links from an item up to its root and renders the chain as
segments, titles and a breadcrumb string such as
``"Product > Marketing > Launch Ads"``.

Traversal never trusts the hierarchy to be acyclic: every walk keeps a
visited set and stops at ``max_depth`` ancestors.

Examples:
    >>> resolver = PathResolver(store)
    >>> resolver.build_breadcrumb("launch-ads")
    'Product > Marketing > Launch Ads'
    >>> resolver.build_relative_path("launch-ads", context_levels=1)
    '... > Marketing > Launch Ads'
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from loguru import logger

from arborist.core.constants import DEFAULT_MAX_PATH_DEPTH, UNKNOWN_ITEM_TITLE, UNTITLED
from arborist.core.exceptions import ItemNotFoundError
from arborist.core.models import WorkItem
from arborist.interfaces.hierarchy_store import HierarchyStore

DEFAULT_SEPARATOR = " > "


@dataclass(frozen=True)
class PathSegment:
    id: str
    title: str


@dataclass
class PathResult:
    """Root-to-item path."""

    segments: list[PathSegment] = field(default_factory=list)
    breadcrumb: str = ""
    titles: list[str] = field(default_factory=list)


class PathResolver:
    """Resolves root-to-item paths against a hierarchy store."""

    def __init__(self, store: HierarchyStore, max_depth: int = DEFAULT_MAX_PATH_DEPTH):
        """Initialize path resolver.

        Args:
            store: Hierarchy store used for item and parent lookups
            max_depth: Maximum number of ancestors walked before giving up
        """
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self._store = store
        self._max_depth = max_depth

    def build_path(
        self,
        item_id: str,
        separator: str = DEFAULT_SEPARATOR,
        include_current: bool = True,
    ) -> PathResult:
        """Build the path from the root down to ``item_id``.

        Args:
            item_id: Item to resolve
            separator: Breadcrumb separator
            include_current: Include the item itself as the last segment

        Returns:
            PathResult with segments, titles and breadcrumb

        Raises:
            ItemNotFoundError: If ``item_id`` is not in the store
        """
        current = self._store.get_item(item_id)
        if current is None:
            raise ItemNotFoundError(item_id)

        segments: list[PathSegment] = []
        if include_current:
            segments.append(PathSegment(item_id, _title_of(current)))

        visited = {item_id}
        current_id = item_id
        depth = 0

        while depth < self._max_depth:
            parent_id = self._store.parent_of(current_id)
            if not parent_id:
                break
            if parent_id in visited:
                logger.warning(
                    f"Cycle detected in hierarchy at {parent_id} while resolving {item_id}"
                )
                break
            visited.add(parent_id)

            parent = self._store.get_item(parent_id)
            if parent is None:
                break

            segments.insert(0, PathSegment(parent_id, _title_of(parent)))
            current_id = parent_id
            depth += 1

        if depth >= self._max_depth:
            logger.warning(
                f"Path building hit maximum depth limit ({self._max_depth}) for item {item_id}"
            )

        titles = [segment.title for segment in segments]
        return PathResult(
            segments=segments, breadcrumb=separator.join(titles), titles=titles
        )

    def build_breadcrumb(
        self,
        item_id: str,
        separator: str = DEFAULT_SEPARATOR,
        include_current: bool = True,
    ) -> str:
        return self.build_path(item_id, separator, include_current).breadcrumb

    def get_path_titles(self, item_id: str, include_current: bool = True) -> list[str]:
        return self.build_path(item_id, DEFAULT_SEPARATOR, include_current).titles

    def get_parent_path_titles(self, item_id: str) -> list[str]:
        """Ancestor titles from root to immediate parent."""
        return self.get_path_titles(item_id, include_current=False)

    def build_relative_path(
        self,
        item_id: str,
        context_levels: int = 2,
        separator: str = DEFAULT_SEPARATOR,
    ) -> str:
        """Breadcrumb limited to the item and its nearest ``context_levels`` ancestors.

        Truncated paths are prefixed with ``"..."``.
        """
        if context_levels < 0:
            raise ValueError("context_levels must be non-negative")

        full_path = self.build_path(item_id, separator, include_current=True)
        if len(full_path.titles) <= context_levels + 1:
            return full_path.breadcrumb

        relative_titles = full_path.titles[-(context_levels + 1) :]
        return "..." + separator + separator.join(relative_titles)

    def resolve_titles_or_fallback(self, item_id: str, fallback_title: str) -> list[str]:
        """Path titles for an item, or ``[fallback_title]`` if resolution fails."""
        try:
            titles = self.get_path_titles(item_id)
        except ItemNotFoundError:
            logger.debug(f"Item {item_id} not found for path resolution, using fallback")
            return [fallback_title]
        except Exception as e:
            logger.warning(f"Path resolution failed for {item_id}: {e}")
            return [fallback_title]
        return titles or [fallback_title]


def build_path_from_map(
    item_id: str,
    items_by_id: Mapping[str, WorkItem],
    parent_map: Mapping[str, str],
    max_depth: int = DEFAULT_MAX_PATH_DEPTH,
) -> list[str]:
    """Root-to-item titles resolved purely from in-memory maps.

    An id missing from ``items_by_id`` contributes ``"Unknown Item"`` and
    ends the walk.
    """
    path: list[str] = []
    visited: set[str] = set()
    current_id: str | None = item_id

    while current_id and current_id not in visited and len(path) <= max_depth:
        visited.add(current_id)

        item = items_by_id.get(current_id)
        if item is None:
            path.insert(0, UNKNOWN_ITEM_TITLE)
            break

        path.insert(0, _title_of(item))
        current_id = parent_map.get(current_id)

    return path or [UNKNOWN_ITEM_TITLE]


def _title_of(item: WorkItem) -> str:
    return item.title or UNTITLED
