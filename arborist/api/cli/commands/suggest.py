"""Suggest command - ranked parent suggestions for a new item."""

import argparse

from loguru import logger

from arborist.core.config.config import Config
from arborist.core.models import ItemContent
from arborist.services.classification_service import ClassificationService
from arborist.services.parent_suggestion_service import ParentSuggestionService
from arborist.services.path_resolver import PathResolver
from arborist.services.vector_placement_service import VectorPlacementService
from arborist.services.vector_search import VectorSearchService

from ..utils.rich_output import RichOutputFormatter
from ..utils.snapshot import build_embedding_service, build_oracle, load_snapshot


async def suggest_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the suggest command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
    """
    formatter = RichOutputFormatter(verbose=args.verbose)
    placement = config.placement

    store = load_snapshot(args.snapshot)
    formatter.verbose_info(f"Loaded {len(store)} items from {args.snapshot}")

    vector_placement = VectorPlacementService(
        build_embedding_service(config),
        VectorSearchService(store),
        store,
        min_pool_size=placement.min_pool_size,
        threshold_relaxation=placement.threshold_relaxation,
        relaxed_floor=placement.relaxed_floor,
        family_share=placement.family_share,
    )
    service = ParentSuggestionService(
        vector_placement,
        ClassificationService(build_oracle(config)),
        store,
        path_resolver=PathResolver(store, max_depth=placement.max_path_depth),
        oracle_confidence_threshold=placement.oracle_confidence_threshold,
        ranker_similarity_threshold=placement.suggestion_similarity_threshold,
    )

    item = ItemContent(title=args.title, description=args.description, vision=args.vision)
    result = await service.suggest_parents(
        item,
        limit=args.limit if args.limit is not None else placement.suggestion_limit,
        confidence_threshold=(
            args.threshold if args.threshold is not None else placement.confidence_threshold
        ),
        include_create_new=placement.include_create_new and not args.no_create_new,
    )
    logger.info(
        f"{result.total_candidates} suggestions in {result.total_processing_time_ms:.1f}ms"
    )

    if args.json:
        formatter.json_output(result.to_dict())
        return

    if not result.suggestions:
        formatter.warning("No parent suggestions above the confidence threshold")
        return

    formatter.suggestions_table(result.suggestions)
