"""Content analysis service for work items.

Coordinates text preprocessing and keyword extraction into a structured
analysis (important terms plus a 0-1 content quality score) used by
placement decisions, and compares items by keyword similarity.
"""

import asyncio
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from arborist.core.models import ItemContent, ScoringMethod
from arborist.core.utils.keyword_extraction import (
    DEFAULT_EXTRACTION_OPTIONS,
    KeywordExtractionResult,
    calculate_keyword_similarity,
    extract_keywords_and_phrases,
    get_important_terms,
)
from arborist.core.utils.text_processing import PreprocessedText, preprocess_action_text

HIGH_SIMILARITY = 0.4
MODERATE_SIMILARITY = 0.2


@dataclass(frozen=True)
class AnalysisOptions:
    """Options for content analysis."""

    max_keywords: int = 12
    max_phrases: int = 6
    min_content_length: int = 10
    remove_stop_words: bool = True
    min_token_length: int = 3
    scoring_method: ScoringMethod = "weighted"

    def __post_init__(self) -> None:
        if self.max_keywords < 0 or self.max_phrases < 0:
            raise ValueError("max_keywords and max_phrases must be non-negative")
        if self.min_content_length < 0 or self.min_token_length < 1:
            raise ValueError("Invalid content or token length threshold")


DEFAULT_ANALYSIS_OPTIONS = AnalysisOptions()


@dataclass
class AnalysisMetadata:
    content_length: int
    quality_score: float
    has_sufficient_content: bool
    analyzed_at: str
    processing_time: float  # milliseconds


@dataclass
class AnalysisResult:
    """Full analysis of one item's content."""

    item: ItemContent
    preprocessed: PreprocessedText
    keywords: KeywordExtractionResult
    important_terms: list[str]
    metadata: AnalysisMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": {
                "title": self.item.title,
                "description": self.item.description,
                "vision": self.item.vision,
            },
            "tokens": self.preprocessed.ordered_tokens(),
            "keywords": self.keywords.to_dict(),
            "important_terms": self.important_terms,
            "metadata": {
                "content_length": self.metadata.content_length,
                "quality_score": self.metadata.quality_score,
                "has_sufficient_content": self.metadata.has_sufficient_content,
                "analyzed_at": self.metadata.analyzed_at,
                "processing_time": self.metadata.processing_time,
            },
        }


@dataclass
class ComparisonResult:
    similarity: float
    analysis_a: AnalysisResult
    analysis_b: AnalysisResult
    shared_terms: list[str]
    high_similarity: bool
    moderate_similarity: bool
    processing_time: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "similarity": self.similarity,
            "analysis_a": self.analysis_a.to_dict(),
            "analysis_b": self.analysis_b.to_dict(),
            "shared_terms": self.shared_terms,
            "high_similarity": self.high_similarity,
            "moderate_similarity": self.moderate_similarity,
            "processing_time": self.processing_time,
        }


@dataclass
class BatchAnalysisResult:
    analyses: list[AnalysisResult]
    average_quality: float
    total_processing_time: float


@dataclass
class SimilarityRanking:
    item: ItemContent
    similarity: float
    analysis: AnalysisResult


@dataclass
class MostSimilarResult:
    most_similar: ItemContent | None
    similarity: float
    target_analysis: AnalysisResult
    rankings: list[SimilarityRanking] = field(default_factory=list)


def calculate_content_length(item: ItemContent) -> int:
    """Total characters across title, description and vision."""
    return len(item.title or "") + len(item.description or "") + len(item.vision or "")


def calculate_quality_score(keywords: KeywordExtractionResult, content_length: int) -> float:
    """Content quality in [0, 1].

    Weighted sum of content length (0.3, saturating at 200 chars), token
    diversity (0.3), keyword count (0.2, saturating at 8) and phrase count
    (0.2, saturating at 4).
    """
    length_score = min(content_length / 200, 1.0) * 0.3

    total_tokens = keywords.metadata.total_tokens
    unique_tokens = keywords.metadata.unique_tokens
    diversity_score = (unique_tokens / total_tokens) * 0.3 if total_tokens > 0 else 0.0

    keyword_score = min(len(keywords.keywords) / 8, 1.0) * 0.2
    phrase_score = min(len(keywords.phrases) / 4, 1.0) * 0.2

    return min(length_score + diversity_score + keyword_score + phrase_score, 1.0)


class AnalysisService:
    """Service for analyzing and comparing work item content."""

    def __init__(self, options: AnalysisOptions = DEFAULT_ANALYSIS_OPTIONS):
        self._options = options

    async def analyze_action(
        self, item: ItemContent, options: AnalysisOptions | None = None
    ) -> AnalysisResult:
        """Analyze an item's content.

        Args:
            item: Content to analyze
            options: Per-call options overriding the service defaults

        Returns:
            AnalysisResult with keywords, important terms and quality metadata
        """
        opts = options or self._options
        item = ItemContent.of(item)
        start_time = time.perf_counter()

        content_length = calculate_content_length(item)

        preprocessed = preprocess_action_text(
            item,
            remove_stopwords=opts.remove_stop_words,
            min_token_length=opts.min_token_length,
        )
        keywords = extract_keywords_and_phrases(
            item,
            replace(
                DEFAULT_EXTRACTION_OPTIONS,
                max_keywords=opts.max_keywords,
                max_phrases=opts.max_phrases,
                scoring_method=opts.scoring_method,
            ),
        )
        important_terms = get_important_terms(item, min(8, opts.max_keywords))
        quality_score = calculate_quality_score(keywords, content_length)

        return AnalysisResult(
            item=item,
            preprocessed=preprocessed,
            keywords=keywords,
            important_terms=important_terms,
            metadata=AnalysisMetadata(
                content_length=content_length,
                quality_score=quality_score,
                has_sufficient_content=content_length >= opts.min_content_length,
                analyzed_at=datetime.now(timezone.utc).isoformat(),
                processing_time=(time.perf_counter() - start_time) * 1000,
            ),
        )

    async def compare_actions(
        self,
        item_a: ItemContent,
        item_b: ItemContent,
        options: AnalysisOptions | None = None,
    ) -> ComparisonResult:
        """Compare two items by keyword similarity.

        ``high_similarity`` is set at >= 0.4 and ``moderate_similarity`` for
        [0.2, 0.4).
        """
        start_time = time.perf_counter()
        item_a = ItemContent.of(item_a)
        item_b = ItemContent.of(item_b)

        analysis_a, analysis_b = await asyncio.gather(
            self.analyze_action(item_a, options),
            self.analyze_action(item_b, options),
        )

        similarity = calculate_keyword_similarity(item_a, item_b)

        terms_b = set(analysis_b.important_terms)
        shared_terms = [
            term for term in dict.fromkeys(analysis_a.important_terms) if term in terms_b
        ]

        return ComparisonResult(
            similarity=similarity,
            analysis_a=analysis_a,
            analysis_b=analysis_b,
            shared_terms=shared_terms,
            high_similarity=similarity >= HIGH_SIMILARITY,
            moderate_similarity=MODERATE_SIMILARITY <= similarity < HIGH_SIMILARITY,
            processing_time=(time.perf_counter() - start_time) * 1000,
        )

    async def batch_analyze(
        self, items: list[ItemContent], options: AnalysisOptions | None = None
    ) -> BatchAnalysisResult:
        """Analyze independent items concurrently."""
        start_time = time.perf_counter()

        analyses = list(
            await asyncio.gather(*(self.analyze_action(item, options) for item in items))
        )
        average_quality = (
            sum(a.metadata.quality_score for a in analyses) / len(analyses)
            if analyses
            else 0.0
        )

        logger.debug(
            f"Batch analyzed {len(analyses)} items (average quality {average_quality:.3f})"
        )
        return BatchAnalysisResult(
            analyses=analyses,
            average_quality=average_quality,
            total_processing_time=(time.perf_counter() - start_time) * 1000,
        )

    async def find_most_similar(
        self,
        target: ItemContent,
        candidates: list[ItemContent],
        options: AnalysisOptions | None = None,
    ) -> MostSimilarResult:
        """Rank candidates by keyword similarity to ``target`` (stable on ties)."""
        target = ItemContent.of(target)
        target_analysis = await self.analyze_action(target, options)
        if not candidates:
            return MostSimilarResult(None, 0.0, target_analysis)

        candidate_items = [ItemContent.of(c) for c in candidates]
        candidate_analyses = await asyncio.gather(
            *(self.analyze_action(c, options) for c in candidate_items)
        )

        rankings = sorted(
            (
                SimilarityRanking(
                    item=candidate,
                    similarity=calculate_keyword_similarity(target, candidate),
                    analysis=analysis,
                )
                for candidate, analysis in zip(candidate_items, candidate_analyses)
            ),
            key=lambda r: r.similarity,
            reverse=True,
        )

        best = rankings[0]
        return MostSimilarResult(
            most_similar=best.item,
            similarity=best.similarity,
            target_analysis=target_analysis,
            rankings=rankings,
        )


async def quick_analyze(item: ItemContent) -> dict[str, Any]:
    """Essential analysis fields for placement decisions."""
    analysis = await AnalysisService().analyze_action(
        item, replace(DEFAULT_ANALYSIS_OPTIONS, max_keywords=8, max_phrases=3)
    )
    return {
        "important_terms": analysis.important_terms,
        "quality_score": analysis.metadata.quality_score,
        "has_sufficient_content": analysis.metadata.has_sufficient_content,
    }


def needs_placement_analysis(item: ItemContent, parent_id: str | None = None) -> bool:
    """True when no parent is given or the content is very short (< 20 chars)."""
    if not parent_id:
        return True
    return calculate_content_length(ItemContent.of(item)) < 20
