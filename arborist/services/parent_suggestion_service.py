"""Parent suggestion aggregation.

Runs the vector candidate ranker and the classification oracle concurrently
and merges both into one confidence-ranked list (0-100). A CreateParent
decision from the oracle becomes a ``"CREATE_NEW"`` sentinel suggestion
whose confidence is floored at 75 so new-category proposals stay visible.
"""

import asyncio
import math
import time
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from arborist.core.constants import CREATE_NEW_SUGGESTION_ID
from arborist.core.models import (
    ClassificationDecision,
    ItemContent,
    PlacementDecision,
    Suggestion,
    ValidationReport,
)
from arborist.interfaces.hierarchy_store import HierarchyStore
from arborist.services.classification_service import (
    ClassificationService,
    fallback_decision,
)
from arborist.services.path_resolver import PathResolver
from arborist.services.vector_placement_service import (
    VectorPlacementResult,
    VectorPlacementService,
)

CREATE_NEW_MIN_CONFIDENCE = 75
RANKER_SIMILARITY_THRESHOLD = 0.3


def to_percent(value: float) -> int:
    """Scale [0, 1] to an integer percentage, rounding halves up."""
    return int(math.floor(value * 100 + 0.5))


@dataclass
class SuggestionsResult:
    suggestions: list[Suggestion] = field(default_factory=list)
    total_processing_time_ms: float = 0.0
    vector_time_ms: float = 0.0
    classification_time_ms: float = 0.0

    @property
    def total_candidates(self) -> int:
        return len(self.suggestions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "metadata": {
                "total_processing_time_ms": self.total_processing_time_ms,
                "vector_time_ms": self.vector_time_ms,
                "classification_time_ms": self.classification_time_ms,
                "total_candidates": self.total_candidates,
            },
        }


class ParentSuggestionService:
    """Combines vector candidates and oracle decisions into parent suggestions."""

    def __init__(
        self,
        vector_placement: VectorPlacementService,
        classification: ClassificationService,
        store: HierarchyStore,
        path_resolver: PathResolver | None = None,
        oracle_confidence_threshold: float = 0.7,
        ranker_similarity_threshold: float = RANKER_SIMILARITY_THRESHOLD,
    ):
        self._vector_placement = vector_placement
        self._classification = classification
        self._store = store
        self._path_resolver = path_resolver or PathResolver(store)
        self._oracle_confidence_threshold = oracle_confidence_threshold
        self._ranker_similarity_threshold = ranker_similarity_threshold

    async def suggest_parents(
        self,
        item: ItemContent,
        limit: int = 5,
        confidence_threshold: int = 40,
        include_create_new: bool = True,
    ) -> SuggestionsResult:
        """Suggest parents for a new item.

        Args:
            item: Content of the item being placed
            limit: Maximum suggestions returned
            confidence_threshold: Minimum confidence (0-100) for vector and
                oracle suggestions; the CREATE_NEW sentinel is exempt
            include_create_new: Emit CREATE_NEW for CreateParent decisions

        Returns:
            SuggestionsResult sorted by confidence, best first
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")

        item = ItemContent.of(item)
        start_time = time.perf_counter()
        existing_items = self._store.list_items(include_completed=False)

        vector_start = time.perf_counter()
        vector_outcome, classification_outcome = await asyncio.gather(
            self._vector_placement.find_vector_family_suggestions(
                item,
                limit=max(10, limit * 2),
                similarity_threshold=self._ranker_similarity_threshold,
                include_hierarchy_paths=True,
            ),
            self._classification.classify_action(
                item, existing_items, self._oracle_confidence_threshold
            ),
            return_exceptions=True,
        )
        joined_ms = (time.perf_counter() - vector_start) * 1000

        if isinstance(vector_outcome, BaseException):
            logger.warning(f"Vector placement failed: {vector_outcome}")
            vector_outcome = VectorPlacementResult()
        if isinstance(classification_outcome, BaseException):
            classification_outcome = fallback_decision(classification_outcome)

        suggestions: dict[str, Suggestion] = {}

        for candidate in vector_outcome.candidates:
            confidence = to_percent(candidate.similarity)
            if confidence < confidence_threshold or candidate.id in suggestions:
                continue
            suggestions[candidate.id] = Suggestion(
                id=candidate.id,
                title=candidate.title,
                description=candidate.description,
                confidence=confidence,
                source="vector",
                reasoning=(
                    f"High semantic similarity ({confidence}%) with existing "
                    f"{candidate.title.lower()} work"
                ),
                hierarchy_path=candidate.hierarchy_path,
            )

        self._add_oracle_suggestions(
            suggestions, classification_outcome, confidence_threshold, include_create_new
        )

        ranked = sorted(suggestions.values(), key=lambda s: s.confidence, reverse=True)

        return SuggestionsResult(
            suggestions=ranked[:limit],
            total_processing_time_ms=(time.perf_counter() - start_time) * 1000,
            vector_time_ms=vector_outcome.total_processing_time_ms,
            classification_time_ms=max(
                0.0, joined_ms - vector_outcome.total_processing_time_ms
            ),
        )

    def _add_oracle_suggestions(
        self,
        suggestions: dict[str, Suggestion],
        decision: ClassificationDecision,
        confidence_threshold: int,
        include_create_new: bool,
    ) -> None:
        if decision.decision == PlacementDecision.ADD_AS_CHILD and decision.parent_id:
            confidence = to_percent(decision.confidence)
            parent = self._store.get_item(decision.parent_id)
            if (
                confidence >= confidence_threshold
                and parent is not None
                and decision.parent_id not in suggestions
            ):
                suggestions[parent.id] = Suggestion(
                    id=parent.id,
                    title=parent.title,
                    description=parent.description,
                    confidence=confidence,
                    source="oracle",
                    reasoning=decision.reasoning,
                    hierarchy_path=self._path_resolver.resolve_titles_or_fallback(
                        parent.id, parent.title
                    ),
                )

        if (
            include_create_new
            and decision.decision == PlacementDecision.CREATE_PARENT
            and decision.suggested_parent is not None
        ):
            suggested = decision.suggested_parent
            suggestions[CREATE_NEW_SUGGESTION_ID] = Suggestion(
                id=CREATE_NEW_SUGGESTION_ID,
                title=suggested.title,
                description=suggested.description,
                confidence=max(
                    CREATE_NEW_MIN_CONFIDENCE, to_percent(decision.confidence)
                ),
                source="create_new",
                reasoning=decision.reasoning,
                hierarchy_path=[suggested.title],
                can_create_new_parent=True,
            )

    def validate_suggestion(self, suggestion: Suggestion) -> ValidationReport:
        """Flag weak or dangling suggestions without blocking them."""
        warnings: list[str] = []

        if suggestion.confidence < 50:
            warnings.append("Low confidence suggestion - consider alternative placement")

        if suggestion.source == "vector" and suggestion.confidence < 60:
            warnings.append("Vector similarity is below recommended threshold")

        if (
            not suggestion.can_create_new_parent
            and suggestion.id != CREATE_NEW_SUGGESTION_ID
            and self._store.get_item(suggestion.id) is None
        ):
            warnings.append(f"Parent item {suggestion.id} not found")

        if suggestion.can_create_new_parent and not suggestion.title.strip():
            warnings.append("New parent title cannot be empty")

        return ValidationReport(is_valid=not warnings, warnings=warnings)


def get_detailed_reasoning(suggestion: Suggestion, item: ItemContent) -> str:
    """Longer, source-specific explanation of a suggestion."""
    title = ItemContent.of(item).title
    if suggestion.source == "vector":
        return (
            f'Vector similarity analysis shows {suggestion.confidence}% semantic '
            f'similarity between "{title}" and existing "{suggestion.title}" work. '
            f"The item fits the existing category based on content and context."
        )
    if suggestion.source == "oracle":
        return (
            f'Classification determined this item belongs under "{suggestion.title}" '
            f"with {suggestion.confidence}% confidence. {suggestion.reasoning}"
        )
    if suggestion.source == "create_new":
        return (
            "No existing parent category was found with sufficient confidence. "
            f'Creating a new parent "{suggestion.title}" would organize this type '
            f"of work better. {suggestion.reasoning}"
        )
    return suggestion.reasoning


def to_create_action_format(suggestion: Suggestion) -> dict[str, Any]:
    """Creation instructions: attach to ``family_id`` or create a new parent first."""
    if suggestion.can_create_new_parent:
        return {
            "family_id": None,
            "should_create_parent": True,
            "new_parent": {
                "title": suggestion.title,
                "description": suggestion.description or "",
            },
        }
    return {"family_id": suggestion.id, "should_create_parent": False}
