"""Tests for the in-memory hierarchy and vector store."""

import pytest

from arborist.core.exceptions import VectorStoreError
from arborist.core.models import WorkItem
from arborist.providers.database.memory_provider import InMemoryWorkItemStore


class TestHierarchy:
    def test_children_and_parents(self, product_tree):
        assert product_tree.children_of("marketing") == ["blog", "graphics"]
        assert product_tree.parent_of("blog") == "marketing"
        assert product_tree.parent_of("personal") is None
        assert product_tree.parent_of("missing") is None

    def test_list_items_filters_completed(self, product_tree):
        all_ids = [i.id for i in product_tree.list_items()]
        open_ids = [i.id for i in product_tree.list_items(include_completed=False)]
        assert "checkout" in all_ids
        assert "checkout" not in open_ids
        assert len(product_tree) == 7

    def test_parent_map(self, product_tree):
        parent_map = product_tree.parent_map()
        assert parent_map["blog"] == "marketing"
        assert "launch" not in parent_map

    def test_reparenting_updates_children(self, product_tree):
        product_tree.add_item(WorkItem(id="blog", title="Blog", parent_id="personal"))
        assert product_tree.children_of("marketing") == ["graphics"]
        assert product_tree.children_of("personal") == ["blog"]

    def test_dependencies(self):
        store = InMemoryWorkItemStore([WorkItem(id="a", title="A"), WorkItem(id="b", title="B")])
        store.add_dependency("a", "b")
        store.add_dependency("a", "b")
        assert store.dependencies_of("a") == ["b"]
        assert store.dependents_of("b") == ["a"]
        assert store.dependents_of("a") == []


class TestFromDict:
    def test_snapshot(self):
        store = InMemoryWorkItemStore.from_dict(
            {
                "items": [
                    {"id": "root", "title": "Root"},
                    {"id": "leaf", "title": "Leaf", "parentId": "root", "done": True},
                ],
                "dependencies": [["leaf", "root"]],
            }
        )
        assert store.parent_of("leaf") == "root"
        assert store.get_item("leaf").done is True
        assert store.dependencies_of("leaf") == ["root"]

    def test_missing_items_list(self):
        with pytest.raises(ValueError, match="items"):
            InMemoryWorkItemStore.from_dict({})

    def test_bad_dependency(self):
        with pytest.raises(ValueError, match="pair"):
            InMemoryWorkItemStore.from_dict(
                {"items": [{"id": "a", "title": "A"}], "dependencies": [["a"]]}
            )


class TestVectorSearch:
    @pytest.fixture
    def store(self):
        return InMemoryWorkItemStore(
            [
                WorkItem(id="x", title="X", embedding=[1.0, 0.0, 0.0]),
                WorkItem(id="y", title="Y", embedding=[0.8, 0.6, 0.0]),
                WorkItem(id="z", title="Z", embedding=[0.0, 0.0, 1.0]),
                WorkItem(id="plain", title="No embedding"),
            ]
        )

    @pytest.mark.asyncio
    async def test_ranked_by_cosine(self, store):
        rows = await store.search([1.0, 0.0, 0.0], limit=10, threshold=0.0)
        assert [r["id"] for r in rows] == ["x", "y", "z"]
        assert rows[0]["similarity"] == pytest.approx(1.0)
        assert rows[1]["similarity"] == pytest.approx(0.8)

    @pytest.mark.asyncio
    async def test_threshold_limit_and_exclusion(self, store):
        rows = await store.search([1.0, 0.0, 0.0], limit=1, threshold=0.5, exclude_ids=["x"])
        assert [r["id"] for r in rows] == ["y"]

    @pytest.mark.asyncio
    async def test_completed_items_do_not_take_result_slots(self):
        store = InMemoryWorkItemStore(
            [
                WorkItem(id="d", title="Done", embedding=[1.0, 0.0], done=True),
                WorkItem(id="a", title="A", embedding=[0.9, 0.1]),
                WorkItem(id="b", title="B", embedding=[0.8, 0.2]),
            ]
        )
        rows = await store.search([1.0, 0.0], limit=2, threshold=0.0)
        assert [r["id"] for r in rows] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_ties_keep_insertion_order(self):
        store = InMemoryWorkItemStore(
            [
                WorkItem(id="first", title="First", embedding=[1.0, 0.0]),
                WorkItem(id="second", title="Second", embedding=[2.0, 0.0]),
            ]
        )
        rows = await store.search([1.0, 0.0], limit=5, threshold=0.0)
        assert [r["id"] for r in rows] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self, store):
        with pytest.raises(VectorStoreError):
            await store.search([1.0, 0.0], limit=5, threshold=0.0)

    @pytest.mark.asyncio
    async def test_get_embedding(self, store):
        assert await store.get_embedding("y") == [0.8, 0.6, 0.0]
        assert await store.get_embedding("plain") is None
        assert await store.get_embedding("missing") is None
