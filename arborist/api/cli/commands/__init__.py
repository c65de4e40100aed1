"""Command implementations for the Arborist CLI."""

from .analyze import analyze_command, compare_command
from .place import place_command
from .search import search_command
from .suggest import suggest_command

__all__ = [
    "analyze_command",
    "compare_command",
    "place_command",
    "search_command",
    "suggest_command",
]
