"""Analyze and compare command argument parsers for Arborist CLI."""

import argparse
from typing import Any, cast

from .common_arguments import add_common_arguments, add_item_arguments


def add_analyze_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add analyze command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured analyze subparser
    """
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Extract keywords and score content quality of an item",
        description="Analyze the text of a work item without any external calls.",
    )
    add_item_arguments(analyze_parser)
    analyze_parser.add_argument(
        "--max-keywords",
        type=int,
        default=12,
        help="Maximum keywords to extract (default: 12)",
    )
    analyze_parser.add_argument(
        "--scoring",
        choices=["frequency", "tfidf", "weighted"],
        default="weighted",
        help="Keyword scoring method (default: weighted)",
    )
    add_common_arguments(analyze_parser)
    return cast(argparse.ArgumentParser, analyze_parser)


def add_compare_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add compare command subparser to the main parser."""
    compare_parser = subparsers.add_parser(
        "compare",
        help="Keyword similarity between two items",
        description="Compare two work items by extracted keywords and phrases.",
    )
    compare_parser.add_argument("first", type=str, help="Title of the first item")
    compare_parser.add_argument("second", type=str, help="Title of the second item")
    compare_parser.add_argument(
        "--first-description", type=str, help="Description of the first item"
    )
    compare_parser.add_argument(
        "--second-description", type=str, help="Description of the second item"
    )
    add_common_arguments(compare_parser)
    return cast(argparse.ArgumentParser, compare_parser)


__all__ = ["add_analyze_subparser", "add_compare_subparser"]
