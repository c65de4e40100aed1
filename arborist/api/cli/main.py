"""Arborist CLI entry point."""

import argparse
import asyncio
import sys

from loguru import logger

from arborist.core.config.config import Config
from arborist.core.config.logging_config import LoggingConfig

from .parsers import create_main_parser, setup_subparsers
from .utils.rich_output import RichOutputFormatter
from .utils.snapshot import CLISetupError


def setup_logging(logging_config: LoggingConfig) -> None:
    """Configure loguru sinks from the logging config.

    Console output goes to stderr so that ``--json`` output stays parseable.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=logging_config.console_level,
        format="<level>{level: <8}</level> | {message}",
    )

    if logging_config.is_enabled():
        file_config = logging_config.file
        logger.add(
            file_config.path,
            level=file_config.level,
            rotation=file_config.rotation,
            retention=file_config.retention,
            format=file_config.format,
        )


async def async_main(args: argparse.Namespace, config: Config) -> None:
    """Dispatch to the selected command."""
    if args.command == "analyze":
        from .commands.analyze import analyze_command

        await analyze_command(args, config)
    elif args.command == "compare":
        from .commands.analyze import compare_command

        await compare_command(args, config)
    elif args.command == "suggest":
        from .commands.suggest import suggest_command

        await suggest_command(args, config)
    elif args.command == "search":
        from .commands.search import search_command

        await search_command(args, config)
    elif args.command == "place":
        from .commands.place import place_command

        await place_command(args, config)
    else:
        raise CLISetupError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the Arborist CLI."""
    parser = create_main_parser()
    setup_subparsers(parser)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    formatter = RichOutputFormatter(verbose=getattr(args, "verbose", False))

    try:
        config = Config.from_sources(getattr(args, "config", None), args)
    except ValueError as e:
        formatter.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(config.logging)
    logger.debug(f"Running {args.command} with {config.embedding!r}")

    try:
        asyncio.run(async_main(args, config))
    except CLISetupError as e:
        formatter.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        formatter.warning("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
