#!/usr/bin/env python3
"""
Build per-book MorphGNT JSON files and the books.json manifest.

Each book file (e.g. JHN.json) is structured as:
    {chapter: {verse: [{"text", "lemma", "pos", "parsing"}, ...]}}

Books whose file already exists are skipped; pass --force to re-fetch and
overwrite them. Everything else is configured through MORPHGNT_* environment
variables (see morphgnt.config).

Example usage:
    build-morphgnt
    build-morphgnt --force
    MORPHGNT_SOURCE_DIR=../sblgnt MORPHGNT_LOG_FORMAT=jsonl python -m morphgnt
"""

from __future__ import annotations

import argparse
import logging
import sys
from enum import IntEnum
from typing import Sequence

from .builder import build_corpus
from .catalog import NT_BOOKS, load_catalog
from .config import load_config
from .errors import MorphGNTError
from .fetcher import make_fetcher
from .reporting import RunStatistics, build_summary, configure_logging
from .store import BookStore

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Enumerated exit codes for builder runs."""

    SUCCESS = 0
    BOOK_FAILURES = 1
    PREFLIGHT = 2
    INTERNAL = 10


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch MorphGNT source files and build per-book JSON documents."
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-fetch and overwrite books whose output already exists.",
    )
    return parser.parse_args(argv)


def run(argv: Sequence[str] | None = None) -> ExitCode:
    """Run the builder and return the exit code instead of exiting."""
    args = parse_args(argv)

    try:
        config = load_config()
        configure_logging(config.log_level_value, config.log_format, config.log_file)
    except MorphGNTError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return ExitCode.PREFLIGHT

    stats = RunStatistics.start()
    try:
        catalog = load_catalog(config.catalog_path) if config.catalog_path else NT_BOOKS
        store = BookStore(config.out_dir)
        fetcher = make_fetcher(config)
        result = build_corpus(catalog, fetcher, store, force=args.force, workers=config.workers)
    except MorphGNTError as exc:
        logger.error("Preflight failed: %s", exc, extra={"event": "preflight_failed"})
        return ExitCode.PREFLIGHT
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected error: %s", exc, exc_info=True, extra={"event": "unexpected_error"})
        return ExitCode.INTERNAL

    stats.finish()
    summary = build_summary(result, stats, config.out_dir)
    if result.succeeded:
        logger.info(summary, extra={"event": "build_summary"})
        return ExitCode.SUCCESS
    logger.error(summary, extra={"event": "build_summary"})
    return ExitCode.BOOK_FAILURES


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the build-morphgnt command."""
    sys.exit(int(run(argv)))


if __name__ == "__main__":
    main()
