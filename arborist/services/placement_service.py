"""Best-parent placement for a single new item."""

from loguru import logger

from arborist.core.models import ItemContent, PlacementResult, WorkItem
from arborist.services.analysis_service import AnalysisService
from arborist.services.classification_service import ClassificationService

NO_PARENTS_REASONING = "No potential parent items found"


class PlacementService:
    """Combines content analysis with oracle classification."""

    def __init__(
        self,
        analysis_service: AnalysisService,
        classification_service: ClassificationService,
        confidence_threshold: float = 0.7,
    ):
        self._analysis_service = analysis_service
        self._classification_service = classification_service
        self._confidence_threshold = confidence_threshold

    async def find_best_parent(
        self, item: ItemContent, existing_items: list[WorkItem]
    ) -> PlacementResult:
        """Find the best existing parent for a new item.

        Every node of ``existing_items`` is a potential parent, not only
        roots.

        Args:
            item: Content of the new item
            existing_items: Current hierarchy

        Returns:
            PlacementResult with the content analysis attached. ``best_parent``
            is None for root placement, for a proposed new parent, or when the
            hierarchy is empty.
        """
        item = ItemContent.of(item)
        analysis = await self._analysis_service.analyze_action(item)

        if not existing_items:
            return PlacementResult(
                best_parent=None,
                confidence=0.0,
                reasoning=NO_PARENTS_REASONING,
                analysis=analysis.to_dict(),
            )

        decision = await self._classification_service.classify_action(
            item, existing_items, self._confidence_threshold
        )
        result = ClassificationService.to_placement_result(decision, existing_items)
        result.analysis = analysis.to_dict()

        logger.debug(
            f"Placement for {item.title[:50]!r}: {decision.decision.value} "
            f"(confidence {decision.confidence:.2f})"
        )
        return result
