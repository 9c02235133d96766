"""Command-line entry point.

Usage:
    shaderdocs-render
        Render every document listed in config/package-config.json
    shaderdocs-render <catalog.json>
        Same, with an explicit catalog
    shaderdocs-render <catalog.json> <template> <output> [<template> <output> ...]
        Render the given template/output pairs

Exit codes: 0 all documents rendered, 1 some documents failed,
2 bad arguments or unusable catalog/config.
"""

import sys
from pathlib import Path

from shaderdocs.catalog import CatalogError
from shaderdocs.config import Config, ConfigError, DocumentJob
from shaderdocs.consumers import run_from_config
from shaderdocs.utilities import get_logger, setup_logging

logger = get_logger(__name__)

USAGE = "Usage: shaderdocs-render [<catalog.json> [<template> <output> ...]]"


def parse_args(argv: list[str]) -> tuple[Path | None, list[DocumentJob] | None]:
    """Split argv into (catalog path, explicit jobs). Raises ValueError on bad input."""
    if not argv:
        return None, None
    catalog = Path(argv[0])
    pairs = argv[1:]
    if not pairs:
        return catalog, None
    if len(pairs) % 2:
        raise ValueError("Templates and outputs must be given in pairs")
    jobs = [
        DocumentJob(template=Path(pairs[i]), output=Path(pairs[i + 1]))
        for i in range(0, len(pairs), 2)
    ]
    return catalog, jobs


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("-h", "--help"):
        print(USAGE)
        return 0

    try:
        catalog, jobs = parse_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        print(USAGE)
        return 2

    setup_logging(Config.LOG_DIR, Config.LOG_LEVEL)

    try:
        summary = run_from_config(catalog_path=catalog, documents=jobs)
    except (CatalogError, ConfigError) as e:
        logger.error(f"Aborting run: {e}")
        return 2

    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
