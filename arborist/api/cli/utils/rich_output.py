"""Rich-based output formatting utilities for Arborist CLI commands."""

import json
import os
import sys
from typing import Any

import rich.box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from arborist.core.models import SearchResult, Suggestion


class MessagePrefixes:
    """Constants for consistent message prefixes in fallback mode."""

    WARN = "[WARN]"
    ERROR = "[ERROR]"
    DEBUG = "[DEBUG]"


class RichOutputFormatter:
    """Terminal output for CLI commands, with a plain-text fallback."""

    def __init__(self, verbose: bool = False):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
        """
        self.verbose = verbose
        self._terminal_compatible = self._check_terminal_compatibility()
        self.console = Console() if self._terminal_compatible else None

    def _check_terminal_compatibility(self) -> bool:
        """Check if terminal supports Rich formatting."""
        if os.environ.get("ARBORIST_NO_RICH"):
            return False
        if not sys.stdout.isatty():
            return False
        return os.environ.get("TERM", "") not in ("dumb", "unknown")

    def _safe_print(self, message: str, fallback_prefix: str = "", plain: str = "") -> None:
        """Print with Rich, or the plain message when Rich is unavailable."""
        if self.console is not None:
            self.console.print(message)
            return

        text = plain or message
        if fallback_prefix:
            print(f"{fallback_prefix} {text}")
        else:
            print(text)

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._safe_print(
            f"[yellow][WARN][/yellow] {escape(message)}", MessagePrefixes.WARN, message
        )

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        if self.console is not None:
            Console(stderr=True).print(f"[red][ERROR][/red] {escape(message)}")
        else:
            print(f"{MessagePrefixes.ERROR} {message}", file=sys.stderr)

    def verbose_info(self, message: str) -> None:
        """Print a verbose info message if verbose mode is enabled."""
        if self.verbose:
            self._safe_print(
                f"[cyan][DEBUG][/cyan] {escape(message)}", MessagePrefixes.DEBUG, message
            )

    def section_header(self, title: str) -> None:
        """Print a section header with consistent formatting."""
        if self.console is not None:
            self.console.print(Panel(escape(title), style="bold cyan", padding=(0, 1)))
        else:
            print(f"\n=== {title} ===\n")

    def bullet_list(self, items: list[str], indent: int = 1) -> None:
        """Print a clean bullet list."""
        for item in items:
            self._safe_print(f"{'  ' * indent}- {escape(item)}", plain=f"{'  ' * indent}- {item}")

    def json_output(self, data: dict[str, Any] | list[Any]) -> None:
        """Print data as formatted JSON.

        Plain JSON is written when stdout is not a terminal so the output
        can be piped.
        """
        json_str = json.dumps(data, indent=2, default=str)
        if self.console is not None:
            self.console.print(Syntax(json_str, "json", theme="monokai"))
        else:
            print(json_str)

    def box_section(self, title: str, content: list[tuple[str, str]], width: int = 70) -> None:
        """Print a bordered section with key-value pairs."""
        if self.console is None:
            print(f"\n{title}")
            for key, value in content:
                print(f"  {key}: {value}")
            return

        table = Table(title=title, show_header=False, box=rich.box.ROUNDED)
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value", style="white")
        for key, value in content:
            if len(value) > width - len(key) - 5:
                value = value[: width - len(key) - 8] + "..."
            table.add_row(key, escape(value))
        self.console.print(table)

    def suggestions_table(self, suggestions: list[Suggestion]) -> None:
        """Render parent suggestions, best first."""
        if self.console is None:
            for s in suggestions:
                print(f"{s.confidence:>3}%  [{s.source}] {' > '.join(s.hierarchy_path) or s.title}")
                print(f"      {s.reasoning}")
            return

        table = Table(box=rich.box.SIMPLE_HEAVY)
        table.add_column("Conf.", justify="right", style="green")
        table.add_column("Source", style="magenta")
        table.add_column("Parent", style="bold")
        table.add_column("Reasoning", style="dim")
        for s in suggestions:
            path = " > ".join(s.hierarchy_path) or s.title
            table.add_row(f"{s.confidence}%", s.source, escape(path), escape(s.reasoning))
        self.console.print(table)

    def search_results_table(self, results: list[SearchResult]) -> None:
        """Render ranked search results."""
        if self.console is None:
            for r in results:
                matches = ", ".join(r.keyword_matches or [])
                print(f"{r.score:6.3f}  {r.match_type:<7}  {' > '.join(r.hierarchy_path)}  {matches}")
            return

        table = Table(box=rich.box.SIMPLE_HEAVY)
        table.add_column("Score", justify="right", style="green")
        table.add_column("Match", style="magenta")
        table.add_column("Path", style="bold")
        table.add_column("Terms", style="dim")
        for r in results:
            table.add_row(
                f"{r.score:.3f}",
                r.match_type,
                escape(" > ".join(r.hierarchy_path)),
                escape(", ".join(r.keyword_matches or [])),
            )
        self.console.print(table)
