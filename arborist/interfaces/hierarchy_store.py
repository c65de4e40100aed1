"""HierarchyStore protocol - read-only view of the work item forest."""

from typing import Protocol

from arborist.core.models import WorkItem


class HierarchyStore(Protocol):
    """Abstract protocol for the item hierarchy and dependency graph.

    The store is a snapshot reader: services never mutate it.
    """

    def get_item(self, item_id: str) -> WorkItem | None:
        """Return the item with this id, or None."""
        ...

    def list_items(self, include_completed: bool = True) -> list[WorkItem]:
        """Return all items in insertion order."""
        ...

    def parent_of(self, item_id: str) -> str | None:
        """Return the parent id of an item, or None for roots."""
        ...

    def children_of(self, item_id: str) -> list[str]:
        """Return the ids of direct children."""
        ...

    def dependents_of(self, item_id: str) -> list[str]:
        """Return ids of items that depend on this item."""
        ...

    def dependencies_of(self, item_id: str) -> list[str]:
        """Return ids of items this item depends on."""
        ...

    def parent_map(self) -> dict[str, str]:
        """Return the child id -> parent id map for all non-root items."""
        ...
