"""Classification decision engine.

Asks an injected oracle where a new item belongs (AddAsChild, CreateParent or
AddAsRoot). Oracle failures never reach the caller: they become an AddAsRoot
decision with zero confidence and a reasoning that names the failure.
"""

import uuid

from loguru import logger

from arborist.core.models import (
    ClassificationDecision,
    ItemContent,
    NewParentSuggestion,
    ParentRef,
    PlacementDecision,
    PlacementResult,
    ValidationReport,
    WorkItem,
)
from arborist.interfaces.classification_oracle import ClassificationOracle
from arborist.prompts.classification import build_hierarchy_nodes

LOW_CONFIDENCE = 0.5


def fallback_decision(error: BaseException) -> ClassificationDecision:
    """Root placement used whenever the oracle fails."""
    message = str(error) or type(error).__name__
    return ClassificationDecision(
        decision=PlacementDecision.ADD_AS_ROOT,
        parent_id=None,
        confidence=0.0,
        reasoning=f"Classification failed: {message}. Defaulting to root placement.",
    )


class ClassificationService:
    """Oracle-backed placement classification."""

    def __init__(self, oracle: ClassificationOracle):
        """Initialize classification service.

        Args:
            oracle: External decision maker (LLM-backed in production)
        """
        self._oracle = oracle

    async def classify_action(
        self,
        item: ItemContent,
        existing_items: list[WorkItem],
        confidence_threshold: float = 0.7,
    ) -> ClassificationDecision:
        """Classify one item against the existing hierarchy.

        Makes exactly one oracle call and never raises for oracle failures.

        Args:
            item: Content of the new item
            existing_items: Current nodes (each sent with its children titles)
            confidence_threshold: Threshold the oracle is asked to apply

        Returns:
            The oracle's decision, or the root-placement fallback
        """
        nodes = build_hierarchy_nodes(existing_items)
        try:
            return await self._oracle.classify(
                ItemContent.of(item), nodes, confidence_threshold
            )
        except Exception as e:
            logger.error(f"Error in item classification: {e}")
            return fallback_decision(e)

    async def classify_actions(
        self,
        items: list[ItemContent],
        existing_items: list[WorkItem],
        confidence_threshold: float = 0.7,
    ) -> list[ClassificationDecision]:
        """Classify items one after another.

        A CreateParent decision adds a temporary node to a working copy of
        ``existing_items`` so that later items can be placed under it. The
        caller's list is not modified.
        """
        working = list(existing_items)
        results: list[ClassificationDecision] = []

        for item in items:
            result = await self.classify_action(item, working, confidence_threshold)
            results.append(result)

            if (
                result.decision == PlacementDecision.CREATE_PARENT
                and result.suggested_parent is not None
            ):
                working.append(
                    WorkItem(
                        id=f"temp-{uuid.uuid4().hex[:12]}",
                        title=result.suggested_parent.title,
                        description=result.suggested_parent.description,
                    )
                )

        return results

    @staticmethod
    def validate_classification(
        result: ClassificationDecision, existing_items: list[WorkItem]
    ) -> ValidationReport:
        """Flag questionable decisions without blocking them."""
        warnings: list[str] = []
        recommendations: list[str] = []

        if result.confidence < LOW_CONFIDENCE:
            warnings.append(
                f"Low confidence ({result.confidence}) suggests uncertain placement"
            )

        if result.decision == PlacementDecision.ADD_AS_CHILD:
            if not result.parent_id:
                warnings.append("AddAsChild decision requires a valid parent_id")
            elif not any(item.id == result.parent_id for item in existing_items):
                warnings.append(
                    f"Parent ID {result.parent_id} not found in existing items"
                )

        if result.decision == PlacementDecision.CREATE_PARENT:
            suggested = result.suggested_parent
            if suggested is None:
                warnings.append(
                    "CreateParent decision requires suggested parent information"
                )
            else:
                if not suggested.title.strip():
                    warnings.append("New parent title cannot be empty")
                if not suggested.description.strip():
                    warnings.append("New parent description cannot be empty")

        if result.decision == PlacementDecision.ADD_AS_ROOT and existing_items:
            recommendations.append(
                "Consider if this item could be organized under an existing category"
            )
        if result.decision == PlacementDecision.CREATE_PARENT:
            recommendations.append(
                "Ensure the new parent category will have multiple related items"
            )

        return ValidationReport(
            is_valid=not warnings, warnings=warnings, recommendations=recommendations
        )

    @staticmethod
    def to_placement_result(
        result: ClassificationDecision, existing_items: list[WorkItem]
    ) -> PlacementResult:
        """Map a decision to the best-parent view."""
        best_parent = None
        if result.decision == PlacementDecision.ADD_AS_CHILD and result.parent_id:
            parent = next(
                (item for item in existing_items if item.id == result.parent_id), None
            )
            if parent is not None:
                best_parent = ParentRef(id=parent.id, title=parent.title)

        suggested_new_parent = None
        if (
            result.decision == PlacementDecision.CREATE_PARENT
            and result.suggested_parent is not None
        ):
            suggested_new_parent = NewParentSuggestion(
                title=result.suggested_parent.title,
                description=result.suggested_parent.description,
                reasoning=result.reasoning,
            )

        return PlacementResult(
            best_parent=best_parent,
            confidence=result.confidence,
            reasoning=result.reasoning,
            suggested_new_parent=suggested_new_parent,
        )
