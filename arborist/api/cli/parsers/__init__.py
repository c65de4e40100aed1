"""Argument parser utilities for Arborist CLI commands."""

from .analyze_parser import add_analyze_subparser, add_compare_subparser
from .main_parser import create_main_parser, setup_subparsers
from .search_parser import add_search_subparser
from .suggest_parser import add_place_subparser, add_suggest_subparser

__all__ = [
    "add_analyze_subparser",
    "add_compare_subparser",
    "add_place_subparser",
    "add_search_subparser",
    "add_suggest_subparser",
    "create_main_parser",
    "setup_subparsers",
]
