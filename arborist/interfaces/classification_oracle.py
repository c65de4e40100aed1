"""ClassificationOracle protocol - external placement decision maker."""

from typing import Protocol

from arborist.core.models import ClassificationDecision, ItemContent
from arborist.prompts.classification import HierarchyNode


class ClassificationOracle(Protocol):
    """Abstract protocol for placement oracles (usually an LLM).

    Implementations return a structured decision or raise
    ``ClassificationError``; callers treat any failure as "no opinion".
    """

    async def classify(
        self,
        item: ItemContent,
        hierarchy: list[HierarchyNode],
        confidence_threshold: float = 0.7,
    ) -> ClassificationDecision:
        """Decide where ``item`` belongs in ``hierarchy``."""
        ...
