"""Suggest and place command argument parsers for Arborist CLI."""

import argparse
from typing import Any, cast

from .common_arguments import (
    add_common_arguments,
    add_embedding_arguments,
    add_item_arguments,
    add_snapshot_argument,
)


def add_suggest_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add suggest command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured suggest subparser
    """
    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Suggest parents for a new item",
        description=(
            "Rank existing items as parents for a new item by combining vector "
            "similarity with a classification model decision."
        ),
    )
    add_snapshot_argument(suggest_parser)
    add_item_arguments(suggest_parser)
    suggest_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum suggestions (default: from config, 5)",
    )
    suggest_parser.add_argument(
        "--threshold",
        type=int,
        help="Minimum confidence 0-100 (default: from config, 40)",
    )
    suggest_parser.add_argument(
        "--no-create-new",
        action="store_true",
        help="Never suggest creating a new parent",
    )
    add_embedding_arguments(suggest_parser)
    add_common_arguments(suggest_parser)
    return cast(argparse.ArgumentParser, suggest_parser)


def add_place_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add place command subparser to the main parser."""
    place_parser = subparsers.add_parser(
        "place",
        help="Pick the single best parent for a new item",
        description="Ask the classification model for the best placement of a new item.",
    )
    add_snapshot_argument(place_parser)
    add_item_arguments(place_parser)
    add_common_arguments(place_parser)
    return cast(argparse.ArgumentParser, place_parser)


__all__ = ["add_place_subparser", "add_suggest_subparser"]
