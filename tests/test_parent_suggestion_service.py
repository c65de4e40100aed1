"""Tests for merging vector candidates and oracle decisions into suggestions."""

import math

import pytest

from arborist.core.constants import CREATE_NEW_SUGGESTION_ID
from arborist.core.models import (
    ClassificationDecision,
    ItemContent,
    PlacementDecision,
    SuggestedParent,
    Suggestion,
    WorkItem,
)
from arborist.providers.database.memory_provider import InMemoryWorkItemStore
from arborist.services.classification_service import ClassificationService
from arborist.services.embedding_service import EmbeddingService
from arborist.services.parent_suggestion_service import (
    ParentSuggestionService,
    get_detailed_reasoning,
    to_create_action_format,
    to_percent,
)
from arborist.services.vector_placement_service import VectorPlacementService
from arborist.services.vector_search import VectorSearchService
from tests.helpers.fake_providers import (
    FailingClassificationOracle,
    FakeClassificationOracle,
    FakeEmbeddingProvider,
)

QUERY = ItemContent(title="Plan launch webinar")


def at_similarity(value: float) -> list[float]:
    return [value, math.sqrt(1 - value**2), 0.0]


@pytest.fixture
def store():
    return InMemoryWorkItemStore(
        [
            WorkItem(id="marketing", title="Marketing", embedding=at_similarity(0.6)),
            WorkItem(
                id="m1", title="Email campaign", parent_id="marketing", embedding=at_similarity(0.9)
            ),
            WorkItem(
                id="m2", title="Press release", parent_id="marketing", embedding=at_similarity(0.8)
            ),
            WorkItem(
                id="m-done",
                title="Old webinar",
                parent_id="marketing",
                embedding=at_similarity(0.95),
                done=True,
            ),
            WorkItem(id="engineering", title="Engineering", embedding=at_similarity(0.1)),
            WorkItem(
                id="e1", title="Webinar platform", parent_id="engineering", embedding=at_similarity(0.7)
            ),
            WorkItem(id="events", title="Events", embedding=at_similarity(0.75)),
        ]
    )


def make_service(store, oracle, fail_embeddings=False):
    provider = FakeEmbeddingProvider(
        dims=3, vectors={"Plan launch webinar": [1.0, 0.0, 0.0]}, fail=fail_embeddings
    )
    vector_placement = VectorPlacementService(
        EmbeddingService(provider), VectorSearchService(store), store
    )
    return ParentSuggestionService(vector_placement, ClassificationService(oracle), store)


def child_of(parent_id, confidence=0.9):
    return ClassificationDecision(
        decision=PlacementDecision.ADD_AS_CHILD,
        parent_id=parent_id,
        confidence=confidence,
        reasoning="Fits the existing category",
    )


def create_parent(confidence=0.4):
    return ClassificationDecision(
        decision=PlacementDecision.CREATE_PARENT,
        parent_id=None,
        confidence=confidence,
        reasoning="Nothing covers webinars yet",
        suggested_parent=SuggestedParent("Webinars", "Online events and talks"),
    )


def test_to_percent_rounds_halves_up():
    assert to_percent(0.125) == 13
    assert to_percent(0.375) == 38
    assert to_percent(0.0) == 0
    assert to_percent(1.0) == 100


class TestSuggestParents:
    @pytest.mark.asyncio
    async def test_vector_candidates_sorted_by_confidence(self, store):
        result = await make_service(store, FakeClassificationOracle()).suggest_parents(QUERY)

        assert [(s.id, s.confidence) for s in result.suggestions] == [
            ("events", 75),
            ("e1", 70),
            ("marketing", 64),
        ]
        assert all(s.source == "vector" for s in result.suggestions)
        assert result.suggestions[0].reasoning == (
            "High semantic similarity (75%) with existing events work"
        )
        assert result.total_candidates == 3

    @pytest.mark.asyncio
    async def test_threshold_filters_vector_suggestions(self, store):
        result = await make_service(store, FakeClassificationOracle()).suggest_parents(
            QUERY, confidence_threshold=70
        )
        assert [s.id for s in result.suggestions] == ["events", "e1"]

    @pytest.mark.asyncio
    async def test_limit_truncates_after_sorting(self, store):
        service = make_service(store, FakeClassificationOracle())

        top = await service.suggest_parents(QUERY, limit=1)
        assert [s.id for s in top.suggestions] == ["events"]

        none = await service.suggest_parents(QUERY, limit=0)
        assert none.suggestions == []

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self, store):
        with pytest.raises(ValueError):
            await make_service(store, FakeClassificationOracle()).suggest_parents(
                QUERY, limit=-1
            )

    @pytest.mark.asyncio
    async def test_oracle_parent_added_with_path(self, store):
        oracle = FakeClassificationOracle(child_of("engineering", 0.82))
        result = await make_service(store, oracle).suggest_parents(QUERY)

        first = result.suggestions[0]
        assert (first.id, first.confidence, first.source) == ("engineering", 82, "oracle")
        assert first.hierarchy_path == ["Engineering"]
        assert first.reasoning == "Fits the existing category"

    @pytest.mark.asyncio
    async def test_vector_entry_wins_over_oracle_duplicate(self, store):
        oracle = FakeClassificationOracle(child_of("marketing", 0.95))
        result = await make_service(store, oracle).suggest_parents(QUERY)

        marketing = [s for s in result.suggestions if s.id == "marketing"]
        assert len(marketing) == 1
        assert marketing[0].source == "vector"
        assert marketing[0].confidence == 64

    @pytest.mark.asyncio
    async def test_oracle_parent_below_threshold_dropped(self, store):
        oracle = FakeClassificationOracle(child_of("engineering", 0.3))
        result = await make_service(store, oracle).suggest_parents(QUERY)
        assert "engineering" not in [s.id for s in result.suggestions]

    @pytest.mark.asyncio
    async def test_oracle_parent_missing_from_store_dropped(self, store):
        oracle = FakeClassificationOracle(child_of("ghost", 0.9))
        result = await make_service(store, oracle).suggest_parents(QUERY)
        assert "ghost" not in [s.id for s in result.suggestions]

    @pytest.mark.asyncio
    async def test_create_new_floored_and_exempt_from_threshold(self, store):
        result = await make_service(
            store, FakeClassificationOracle(create_parent(0.4))
        ).suggest_parents(QUERY, confidence_threshold=80)

        assert len(result.suggestions) == 1
        sentinel = result.suggestions[0]
        assert sentinel.id == CREATE_NEW_SUGGESTION_ID
        assert sentinel.confidence == 75
        assert sentinel.source == "create_new"
        assert sentinel.can_create_new_parent is True
        assert sentinel.title == "Webinars"
        assert sentinel.hierarchy_path == ["Webinars"]

    @pytest.mark.asyncio
    async def test_create_new_keeps_higher_confidence(self, store):
        result = await make_service(
            store, FakeClassificationOracle(create_parent(0.9))
        ).suggest_parents(QUERY)
        assert result.suggestions[0].id == CREATE_NEW_SUGGESTION_ID
        assert result.suggestions[0].confidence == 90

    @pytest.mark.asyncio
    async def test_create_new_can_be_disabled(self, store):
        result = await make_service(
            store, FakeClassificationOracle(create_parent(0.9))
        ).suggest_parents(QUERY, include_create_new=False)
        assert CREATE_NEW_SUGGESTION_ID not in [s.id for s in result.suggestions]

    @pytest.mark.asyncio
    async def test_oracle_failure_keeps_vector_suggestions(self, store):
        result = await make_service(store, FailingClassificationOracle()).suggest_parents(
            QUERY
        )
        assert [s.id for s in result.suggestions] == ["events", "e1", "marketing"]

    @pytest.mark.asyncio
    async def test_embedding_failure_keeps_oracle_suggestion(self, store, log_messages):
        oracle = FakeClassificationOracle(child_of("engineering", 0.82))
        result = await make_service(store, oracle, fail_embeddings=True).suggest_parents(
            QUERY
        )

        assert [s.id for s in result.suggestions] == ["engineering"]
        assert any("Embedding generation failed" in m for m in log_messages)

    @pytest.mark.asyncio
    async def test_oracle_sees_only_open_items(self, store):
        oracle = FakeClassificationOracle()
        await make_service(store, oracle).suggest_parents(QUERY)

        assert len(oracle.calls) == 1
        node_ids = [node.id for node in oracle.calls[0].hierarchy]
        assert "m-done" not in node_ids
        assert oracle.calls[0].confidence_threshold == 0.7

    @pytest.mark.asyncio
    async def test_metadata_serialized(self, store):
        result = await make_service(store, FakeClassificationOracle()).suggest_parents(QUERY)
        data = result.to_dict()

        assert data["metadata"]["total_candidates"] == 3
        assert data["metadata"]["total_processing_time_ms"] >= 0
        assert data["suggestions"][0]["id"] == "events"


def _suggestion(**overrides):
    values = dict(
        id="marketing",
        title="Marketing",
        description="Promote things",
        confidence=80,
        source="vector",
        reasoning="Similar work",
        hierarchy_path=["Marketing"],
    )
    values.update(overrides)
    return Suggestion(**values)


class TestValidateSuggestion:
    def test_strong_suggestion_is_valid(self, store):
        service = make_service(store, FakeClassificationOracle())
        report = service.validate_suggestion(_suggestion())
        assert report.is_valid
        assert report.warnings == []

    def test_weak_vector_suggestion_warns_twice(self, store):
        service = make_service(store, FakeClassificationOracle())
        report = service.validate_suggestion(_suggestion(confidence=45))
        assert not report.is_valid
        assert len(report.warnings) == 2

    def test_missing_parent_warns(self, store):
        service = make_service(store, FakeClassificationOracle())
        report = service.validate_suggestion(_suggestion(id="ghost", source="oracle"))
        assert report.warnings == ["Parent item ghost not found"]

    def test_create_new_needs_title(self, store):
        service = make_service(store, FakeClassificationOracle())
        report = service.validate_suggestion(
            _suggestion(
                id=CREATE_NEW_SUGGESTION_ID,
                title="  ",
                source="create_new",
                can_create_new_parent=True,
            )
        )
        assert report.warnings == ["New parent title cannot be empty"]


class TestPresentationHelpers:
    def test_detailed_reasoning_per_source(self):
        item = ItemContent(title="Plan launch webinar")

        vector = get_detailed_reasoning(_suggestion(confidence=82), item)
        assert "82% semantic similarity" in vector
        assert '"Plan launch webinar"' in vector

        oracle = get_detailed_reasoning(_suggestion(source="oracle"), item)
        assert oracle.endswith("Similar work")
        assert 'belongs under "Marketing"' in oracle

        create = get_detailed_reasoning(
            _suggestion(source="create_new", title="Webinars"), item
        )
        assert 'Creating a new parent "Webinars"' in create

    def test_create_action_format_for_existing_parent(self):
        assert to_create_action_format(_suggestion()) == {
            "family_id": "marketing",
            "should_create_parent": False,
        }

    def test_create_action_format_for_new_parent(self):
        suggestion = _suggestion(
            id=CREATE_NEW_SUGGESTION_ID,
            title="Webinars",
            description=None,
            source="create_new",
            can_create_new_parent=True,
        )
        assert to_create_action_format(suggestion) == {
            "family_id": None,
            "should_create_parent": True,
            "new_parent": {"title": "Webinars", "description": ""},
        }
