"""Place command - single best parent for a new item."""

import argparse

from arborist.core.config.config import Config
from arborist.core.models import ItemContent
from arborist.services.analysis_service import AnalysisService
from arborist.services.classification_service import ClassificationService
from arborist.services.placement_service import PlacementService

from ..utils.rich_output import RichOutputFormatter
from ..utils.snapshot import build_oracle, load_snapshot


async def place_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the place command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
    """
    formatter = RichOutputFormatter(verbose=args.verbose)

    store = load_snapshot(args.snapshot)
    service = PlacementService(
        AnalysisService(),
        ClassificationService(build_oracle(config)),
        confidence_threshold=config.placement.oracle_confidence_threshold,
    )

    item = ItemContent(title=args.title, description=args.description, vision=args.vision)
    result = await service.find_best_parent(item, store.list_items(include_completed=False))

    if args.json:
        formatter.json_output(result.to_dict())
        return

    if result.best_parent is not None:
        target = f"{result.best_parent.title} ({result.best_parent.id})"
    elif result.suggested_new_parent is not None:
        target = f"new parent: {result.suggested_new_parent.title}"
    else:
        target = "root"

    formatter.box_section(
        "Placement",
        [
            ("Target", target),
            ("Confidence", f"{result.confidence:.2f}"),
            ("Reasoning", result.reasoning),
        ],
        width=120,
    )
