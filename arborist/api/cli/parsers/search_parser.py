"""Search command argument parser for Arborist CLI."""

import argparse
from typing import Any, cast

from .common_arguments import (
    add_common_arguments,
    add_embedding_arguments,
    add_snapshot_argument,
)


def add_search_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add search command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured search subparser
    """
    search_parser = subparsers.add_parser(
        "search",
        help="Hybrid vector and keyword search",
        description=(
            "Search items by free text, or pass an item UUID to list the item "
            "with its dependencies, parent, siblings and children."
        ),
    )
    add_snapshot_argument(search_parser)
    search_parser.add_argument("query", type=str, help="Search text or item UUID")
    search_parser.add_argument(
        "--mode",
        choices=["vector", "keyword", "hybrid"],
        help="Search mode (default: from config, hybrid)",
    )
    search_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum results (default: from config, 20)",
    )
    search_parser.add_argument(
        "--threshold",
        type=float,
        help="Minimum vector similarity (default: from config, 0.3)",
    )
    search_parser.add_argument(
        "--include-completed",
        action="store_true",
        help="Include completed items in keyword matches",
    )
    search_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="ID",
        help="Item id to exclude (repeatable)",
    )
    search_parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print title completions for the query instead of results",
    )
    add_embedding_arguments(search_parser)
    add_common_arguments(search_parser)
    return cast(argparse.ArgumentParser, search_parser)


__all__ = ["add_search_subparser"]
