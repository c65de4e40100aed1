"""Common CLI argument patterns shared across parsers."""

import argparse
from pathlib import Path

from arborist.core.config.embedding_config import EmbeddingConfig


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments common to all commands.

    Args:
        parser: Argument parser to add common arguments to
    """
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file path (JSON)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Enable file logging to specified path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set file logging level (default: INFO)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_item_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the content fields of a new work item."""
    parser.add_argument("title", type=str, help="Item title")
    parser.add_argument("--description", "-d", type=str, help="Item description")
    parser.add_argument("--vision", type=str, help="Item vision (desired outcome)")


def add_snapshot_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "snapshot",
        type=Path,
        help='Hierarchy snapshot JSON ({"items": [...], "dependencies": [...]})',
    )


def add_embedding_arguments(parser: argparse.ArgumentParser) -> None:
    EmbeddingConfig.add_cli_arguments(parser)
