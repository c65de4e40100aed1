"""Tests for the content analysis service."""

import pytest

from arborist.core.models import ItemContent
from arborist.services.analysis_service import (
    AnalysisOptions,
    AnalysisService,
    calculate_content_length,
    needs_placement_analysis,
    quick_analyze,
)

RICH_ITEM = ItemContent(
    title="Build customer onboarding email sequence",
    description=(
        "Create a five-part onboarding email sequence that introduces new customers "
        "to core features, with onboarding email templates and tracking for each step"
    ),
    vision="New customers activate within their first week",
)


@pytest.fixture
def service():
    return AnalysisService()


class TestAnalyzeAction:
    @pytest.mark.asyncio
    async def test_quality_score_in_range(self, service):
        analysis = await service.analyze_action(RICH_ITEM)
        assert 0.0 <= analysis.metadata.quality_score <= 1.0
        assert analysis.metadata.has_sufficient_content is True
        assert analysis.important_terms

    @pytest.mark.asyncio
    async def test_empty_item(self, service):
        analysis = await service.analyze_action(ItemContent())
        assert analysis.metadata.content_length == 0
        assert analysis.metadata.quality_score == 0.0
        assert analysis.metadata.has_sufficient_content is False
        assert analysis.important_terms == []

    @pytest.mark.asyncio
    async def test_short_content_is_insufficient(self, service):
        analysis = await service.analyze_action(ItemContent(title="Fix bug"))
        assert analysis.metadata.content_length == 7
        assert analysis.metadata.has_sufficient_content is False

    @pytest.mark.asyncio
    async def test_longer_content_scores_higher(self, service):
        short = await service.analyze_action(ItemContent(title="Email"))
        rich = await service.analyze_action(RICH_ITEM)
        assert rich.metadata.quality_score > short.metadata.quality_score

    @pytest.mark.asyncio
    async def test_more_content_never_lowers_quality_or_keywords(self, service):
        steps = [
            ItemContent(title="Fix"),
            ItemContent(title="Fix user authentication bug"),
            ItemContent(
                title="Fix user authentication bug",
                description="Users cannot log in once the password reset link expires",
                vision="Every customer signs in reliably",
            ),
        ]
        analyses = [await service.analyze_action(step) for step in steps]
        scores = [a.metadata.quality_score for a in analyses]
        keyword_counts = [len(a.keywords.keywords) for a in analyses]

        assert scores == sorted(scores)
        assert keyword_counts == sorted(keyword_counts)
        assert keyword_counts[0] == 1

    @pytest.mark.asyncio
    async def test_deterministic_apart_from_timing(self, service):
        first = (await service.analyze_action(RICH_ITEM)).to_dict()
        second = (await service.analyze_action(RICH_ITEM)).to_dict()
        for result in (first, second):
            result["metadata"].pop("analyzed_at")
            result["metadata"].pop("processing_time")
        assert first == second

    @pytest.mark.asyncio
    async def test_per_call_options_limit_keywords(self, service):
        analysis = await service.analyze_action(
            RICH_ITEM, AnalysisOptions(max_keywords=2, max_phrases=1)
        )
        assert len(analysis.keywords.keywords) <= 2
        assert len(analysis.keywords.phrases) <= 1

    def test_invalid_options_raise(self):
        with pytest.raises(ValueError):
            AnalysisOptions(max_keywords=-1)


class TestComparison:
    @pytest.mark.asyncio
    async def test_similar_items(self, service):
        other = ItemContent(
            title="Onboarding email templates",
            description="Templates for the customer onboarding email sequence",
        )
        comparison = await service.compare_actions(RICH_ITEM, other)
        unrelated = await service.compare_actions(
            RICH_ITEM, ItemContent(title="Repair garden fence")
        )
        assert comparison.similarity > unrelated.similarity
        assert 0.0 < comparison.similarity <= 1.0

    @pytest.mark.asyncio
    async def test_unrelated_items(self, service):
        comparison = await service.compare_actions(
            RICH_ITEM, ItemContent(title="Repair garden fence")
        )
        assert comparison.similarity == 0.0
        assert comparison.high_similarity is False
        assert comparison.moderate_similarity is False

    @pytest.mark.asyncio
    async def test_find_most_similar_ranks_candidates(self, service):
        candidates = [
            ItemContent(title="Repair garden fence"),
            ItemContent(title="Customer onboarding email sequence"),
            ItemContent(title="Quarterly tax filing"),
        ]
        result = await service.find_most_similar(RICH_ITEM, candidates)
        assert result.most_similar == candidates[1]
        similarities = [r.similarity for r in result.rankings]
        assert similarities == sorted(similarities, reverse=True)

    @pytest.mark.asyncio
    async def test_find_most_similar_without_candidates(self, service):
        result = await service.find_most_similar(RICH_ITEM, [])
        assert result.most_similar is None
        assert result.similarity == 0.0

    @pytest.mark.asyncio
    async def test_batch_analyze_preserves_order(self, service):
        items = [ItemContent(title="First item here"), RICH_ITEM]
        batch = await service.batch_analyze(items)
        assert [a.item for a in batch.analyses] == items
        assert 0.0 <= batch.average_quality <= 1.0


class TestHelpers:
    def test_content_length(self):
        assert calculate_content_length(ItemContent("abc", "de", "f")) == 6

    @pytest.mark.asyncio
    async def test_quick_analyze_fields(self):
        summary = await quick_analyze(RICH_ITEM)
        assert set(summary) == {"important_terms", "quality_score", "has_sufficient_content"}

    def test_needs_placement_analysis(self):
        assert needs_placement_analysis(RICH_ITEM) is True
        assert needs_placement_analysis(RICH_ITEM, parent_id="p1") is False
        assert needs_placement_analysis(ItemContent(title="Short"), parent_id="p1") is True
