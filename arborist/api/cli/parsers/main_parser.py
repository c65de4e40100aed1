"""Main argument parser for Arborist CLI."""

import argparse
from typing import Any

from arborist import __version__

from .analyze_parser import add_analyze_subparser, add_compare_subparser
from .search_parser import add_search_subparser
from .suggest_parser import add_place_subparser, add_suggest_subparser


def create_main_parser() -> argparse.ArgumentParser:
    """Create the top-level ``arborist`` parser."""
    parser = argparse.ArgumentParser(
        prog="arborist",
        description="Hierarchical placement and hybrid search for work item trees",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"arborist {__version__}",
    )
    return parser


def setup_subparsers(parser: argparse.ArgumentParser) -> Any:
    """Register all command subparsers."""
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_analyze_subparser(subparsers)
    add_compare_subparser(subparsers)
    add_suggest_subparser(subparsers)
    add_search_subparser(subparsers)
    add_place_subparser(subparsers)

    return subparsers
