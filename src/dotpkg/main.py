"""Command line entry point: generate the package from JSON snapshot files."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotpkg.config import ConfigError, load_settings
from dotpkg.errors import GenerationError
from dotpkg.generation.orchestrator import GenerationOrchestrator
from dotpkg.schema import FieldOptions, PluginOptions
from dotpkg.source import JsonSnapshotSource

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        level=logging.DEBUG if verbose else logging.INFO,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotpkg",
        description="Generate an importable content package from a schema and documents.",
    )
    parser.add_argument("schema", type=Path, help="Path to the schema JSON file.")
    parser.add_argument("data", type=Path, help="Path to the data cache JSON file.")
    parser.add_argument(
        "--cwd",
        type=Path,
        default=Path("."),
        help="Project directory holding dotpkg.ini (defaults to current directory).",
    )
    parser.add_argument(
        "--type-field",
        default=None,
        help="Document field naming the document type (defaults to 'type').",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


async def _run(args: argparse.Namespace) -> int:
    cwd = args.cwd.expanduser().resolve()
    options = PluginOptions()
    if args.type_field:
        options = PluginOptions(field_options=FieldOptions(type_field_name=args.type_field))

    try:
        settings = load_settings(cwd)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    source = JsonSnapshotSource(args.schema, args.data, options=options)
    orchestrator = GenerationOrchestrator(source, cwd, settings=settings, verbose=args.verbose)
    try:
        await orchestrator.run()
    except GenerationError as e:
        logger.error(f"Generation failed ({e.kind}): {e}")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.verbose)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
