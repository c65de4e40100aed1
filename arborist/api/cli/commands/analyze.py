"""Analyze and compare commands - offline content analysis."""

import argparse

from arborist.core.config.config import Config
from arborist.core.models import ItemContent
from arborist.services.analysis_service import AnalysisOptions, AnalysisService

from ..utils.rich_output import RichOutputFormatter


async def analyze_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the analyze command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
    """
    formatter = RichOutputFormatter(verbose=args.verbose)
    options = AnalysisOptions(max_keywords=args.max_keywords, scoring_method=args.scoring)

    item = ItemContent(title=args.title, description=args.description, vision=args.vision)
    analysis = await AnalysisService(options).analyze_action(item)

    if args.json:
        formatter.json_output(analysis.to_dict())
        return

    metadata = analysis.metadata
    formatter.box_section(
        "Content analysis",
        [
            ("Quality", f"{metadata.quality_score:.2f}"),
            ("Length", str(metadata.content_length)),
            ("Sufficient", "yes" if metadata.has_sufficient_content else "no"),
            ("Terms", ", ".join(analysis.important_terms) or "-"),
        ],
    )
    formatter.section_header("Keywords")
    formatter.bullet_list(
        [f"{k.term} ({k.type}, {k.score:.4f})" for k in analysis.keywords.combined]
    )
    formatter.verbose_info(f"Analyzed in {metadata.processing_time:.1f}ms")


async def compare_command(args: argparse.Namespace, config: Config) -> None:
    """Execute the compare command."""
    formatter = RichOutputFormatter(verbose=args.verbose)

    comparison = await AnalysisService().compare_actions(
        ItemContent(title=args.first, description=args.first_description),
        ItemContent(title=args.second, description=args.second_description),
    )

    if args.json:
        formatter.json_output(comparison.to_dict())
        return

    if comparison.high_similarity:
        verdict = "high"
    elif comparison.moderate_similarity:
        verdict = "moderate"
    else:
        verdict = "low"

    formatter.box_section(
        "Keyword similarity",
        [
            ("Similarity", f"{comparison.similarity:.3f} ({verdict})"),
            ("Shared terms", ", ".join(comparison.shared_terms) or "-"),
        ],
    )
