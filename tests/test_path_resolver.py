"""Unit tests for the hierarchy PathResolver.

Covers root-to-item resolution, breadcrumbs, relative paths, the in-memory
map variant, and defensive behavior on cycles and over-deep chains.
"""

import pytest

from arborist.core.exceptions import ItemNotFoundError
from arborist.core.models import WorkItem
from arborist.providers.database.memory_provider import InMemoryWorkItemStore
from arborist.services.path_resolver import PathResolver, build_path_from_map


class TestPathResolver:
    @pytest.fixture
    def resolver(self, product_tree):
        return PathResolver(product_tree)

    def test_build_path_from_root(self, resolver):
        result = resolver.build_path("blog")
        assert result.titles == [
            "Product Launch",
            "Marketing Campaign",
            "Write blog post about launch",
        ]
        assert [s.id for s in result.segments] == ["launch", "marketing", "blog"]
        assert result.breadcrumb == (
            "Product Launch > Marketing Campaign > Write blog post about launch"
        )

    def test_root_item(self, resolver):
        assert resolver.get_path_titles("personal") == ["Personal"]

    def test_parent_path_excludes_item(self, resolver):
        assert resolver.get_parent_path_titles("blog") == [
            "Product Launch",
            "Marketing Campaign",
        ]
        assert resolver.get_parent_path_titles("personal") == []

    def test_custom_separator(self, resolver):
        assert resolver.build_breadcrumb("marketing", separator=" / ") == (
            "Product Launch / Marketing Campaign"
        )

    def test_relative_path_truncates(self, resolver):
        assert resolver.build_relative_path("blog", context_levels=1) == (
            "... > Marketing Campaign > Write blog post about launch"
        )

    def test_relative_path_short_chain_is_full(self, resolver):
        assert resolver.build_relative_path("marketing", context_levels=2) == (
            "Product Launch > Marketing Campaign"
        )

    def test_missing_item_raises(self, resolver):
        with pytest.raises(ItemNotFoundError, match="missing"):
            resolver.build_path("missing")

    def test_fallback_for_missing_item(self, resolver):
        assert resolver.resolve_titles_or_fallback("missing", "Fallback") == ["Fallback"]

    def test_untitled_items(self):
        store = InMemoryWorkItemStore([WorkItem(id="x", title="")])
        assert PathResolver(store).get_path_titles("x") == ["Untitled"]

    def test_invalid_max_depth(self, product_tree):
        with pytest.raises(ValueError):
            PathResolver(product_tree, max_depth=0)


class TestDefensiveTraversal:
    def test_cycle_terminates(self, log_messages):
        store = InMemoryWorkItemStore(
            [
                WorkItem(id="a", title="A", parent_id="b"),
                WorkItem(id="b", title="B", parent_id="a"),
            ]
        )
        titles = PathResolver(store).get_path_titles("a")
        assert titles == ["B", "A"]
        assert any("Cycle detected" in m for m in log_messages)

    def test_self_parent_terminates(self):
        store = InMemoryWorkItemStore([WorkItem(id="a", title="A", parent_id="a")])
        assert PathResolver(store).get_path_titles("a") == ["A"]

    def test_depth_limit(self, log_messages):
        items = [WorkItem(id="n0", title="N0")]
        items += [WorkItem(id=f"n{i}", title=f"N{i}", parent_id=f"n{i - 1}") for i in range(1, 10)]
        store = InMemoryWorkItemStore(items)

        titles = PathResolver(store, max_depth=3).get_path_titles("n9")
        assert titles == ["N6", "N7", "N8", "N9"]
        assert any("maximum depth" in m for m in log_messages)

    def test_dangling_parent_stops_walk(self):
        store = InMemoryWorkItemStore([WorkItem(id="a", title="A", parent_id="gone")])
        assert PathResolver(store).get_path_titles("a") == ["A"]


class TestBuildPathFromMap:
    def test_resolves_from_maps(self, product_tree):
        items = {item.id: item for item in product_tree.list_items()}
        assert build_path_from_map("blog", items, product_tree.parent_map()) == [
            "Product Launch",
            "Marketing Campaign",
            "Write blog post about launch",
        ]

    def test_unknown_item(self):
        assert build_path_from_map("missing", {}, {}) == ["Unknown Item"]

    def test_unknown_ancestor(self):
        items = {"a": WorkItem(id="a", title="A", parent_id="gone")}
        assert build_path_from_map("a", items, {"a": "gone"}) == ["Unknown Item", "A"]

    def test_cycle(self):
        items = {
            "a": WorkItem(id="a", title="A", parent_id="b"),
            "b": WorkItem(id="b", title="B", parent_id="a"),
        }
        assert build_path_from_map("a", items, {"a": "b", "b": "a"}) == ["B", "A"]
