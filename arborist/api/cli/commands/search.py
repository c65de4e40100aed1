"""Search command - hybrid search over a snapshot."""

import argparse

from arborist.core.config.config import Config
from arborist.services.path_resolver import PathResolver
from arborist.services.search_service import ActionSearchService
from arborist.services.vector_search import VectorSearchService

from ..utils.rich_output import RichOutputFormatter
from ..utils.snapshot import build_embedding_service, load_snapshot


async def search_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the search command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
    """
    formatter = RichOutputFormatter(verbose=args.verbose)
    search = config.search

    store = load_snapshot(args.snapshot)
    service = ActionSearchService(
        store,
        build_embedding_service(config),
        VectorSearchService(store),
        path_resolver=PathResolver(store, max_depth=config.placement.max_path_depth),
        hybrid_boost=search.hybrid_boost,
    )

    limit = args.limit if args.limit is not None else search.limit

    if args.suggest:
        titles = await service.get_search_suggestions(args.query, limit=limit)
        if args.json:
            formatter.json_output(titles)
        else:
            formatter.bullet_list(titles)
        return

    response = await service.search_actions(
        args.query,
        limit=limit,
        similarity_threshold=(
            args.threshold if args.threshold is not None else search.similarity_threshold
        ),
        include_completed=args.include_completed or search.include_completed,
        search_mode=args.mode or search.search_mode,
        exclude_ids=args.exclude,
        min_keyword_length=search.min_keyword_length,
    )

    if args.json:
        formatter.json_output(response.to_dict())
        return

    if not response.results:
        formatter.warning(f"No matches for {args.query!r}")
        return

    formatter.search_results_table(response.results)
    metadata = response.metadata
    formatter.verbose_info(
        f"{response.search_mode}: {metadata.vector_matches} vector, "
        f"{metadata.keyword_matches} keyword, {metadata.hybrid_matches} hybrid "
        f"in {metadata.processing_time_ms:.1f}ms"
    )
