"""
Drive the book catalog through fetch, parse and persist.

Each book moves through:

    PENDING -> SKIPPED
    PENDING -> FETCHING -> PARSING -> PERSISTED
    (any step) -> FAILED

A book whose document already exists is skipped unless ``force`` is set; its
chapter count is read back from the stored document so the manifest stays
complete. Any failure is recorded against that book only and the run moves on.
After the whole catalog has been processed the manifest is written (when at
least one book succeeded). The run as a whole fails if any book failed.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Sequence

from .catalog import BookDescriptor
from .errors import MorphGNTError
from .fetcher import Fetcher
from .parser import count_chapters, count_tokens, parse_book
from .store import BookStore, ManifestEntry

logger = logging.getLogger(__name__)

ExistsPredicate = Callable[[str], bool]


class BookStatus(Enum):
    """Processing state of a single book."""

    PENDING = "pending"
    SKIPPED = "skipped"
    FETCHING = "fetching"
    PARSING = "parsing"
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass
class BookOutcome:
    """Captures what happened to one catalog entry."""

    book: BookDescriptor
    status: BookStatus = BookStatus.PENDING
    chapter_count: int | None = None
    token_count: int | None = None
    output_path: Path | None = None
    failed_stage: str | None = None
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status in (BookStatus.SKIPPED, BookStatus.PERSISTED)

    @property
    def fetched(self) -> bool:
        return self.status is BookStatus.PERSISTED or self.failed_stage in ("parse", "persist")


@dataclass(frozen=True)
class BookFailure:
    """A document-level error recorded during the run."""

    code: str
    name: str
    stage: str
    message: str


@dataclass
class BuildResult:
    """Outcome of a full catalog run, in catalog order."""

    outcomes: List[BookOutcome] = field(default_factory=list)
    manifest_path: Path | None = None
    manifest_error: str | None = None

    @property
    def entries(self) -> List[ManifestEntry]:
        return [
            ManifestEntry(code=o.book.code, name=o.book.name, chapter_count=o.chapter_count or 0)
            for o in self.outcomes
            if o.ok
        ]

    @property
    def failures(self) -> List[BookFailure]:
        return [
            BookFailure(
                code=o.book.code,
                name=o.book.name,
                stage=o.failed_stage or "unknown",
                message=o.error or "",
            )
            for o in self.outcomes
            if o.status is BookStatus.FAILED
        ]

    @property
    def error_count(self) -> int:
        return len(self.failures) + (1 if self.manifest_error else 0)

    @property
    def succeeded(self) -> bool:
        return self.error_count == 0

    @property
    def fetched(self) -> int:
        return sum(1 for o in self.outcomes if o.fetched)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status is BookStatus.SKIPPED)

    @property
    def persisted(self) -> int:
        return sum(1 for o in self.outcomes if o.status is BookStatus.PERSISTED)


def process_book(
    book: BookDescriptor,
    fetcher: Fetcher,
    store: BookStore,
    *,
    force: bool = False,
    exists: ExistsPredicate | None = None,
) -> BookOutcome:
    """Run one book through skip-check, fetch, parse and persist.

    Never raises: errors are captured on the returned outcome.
    """
    exists = exists or store.exists
    outcome = BookOutcome(book=book)
    started = time.monotonic()
    stage = "skip-check"
    try:
        if not force and exists(book.code):
            stage = "read-existing"
            outcome.chapter_count = store.read_chapter_count(book.code)
            outcome.output_path = store.path_for(book.code)
            outcome.status = BookStatus.SKIPPED
            logger.info(
                "Skipping %s (already exists; use --force to re-fetch)",
                book.name,
                extra={"event": "book_skipped", "book": book.code, "chapters": outcome.chapter_count},
            )
            return outcome

        stage = "fetch"
        outcome.status = BookStatus.FETCHING
        location = fetcher.location(book.filename)
        logger.info(
            "Fetching %s from %s",
            book.name,
            location,
            extra={"event": "book_fetching", "book": book.code, "location": location},
        )
        raw = fetcher.fetch(book.filename)

        stage = "parse"
        outcome.status = BookStatus.PARSING
        chapters = parse_book(raw, book.filename)
        outcome.chapter_count = count_chapters(chapters)
        outcome.token_count = count_tokens(chapters)

        stage = "persist"
        outcome.output_path = store.save_book(book.code, chapters)
        outcome.status = BookStatus.PERSISTED
        logger.info(
            "  -> %s (%s chapters)",
            outcome.output_path.name,
            outcome.chapter_count,
            extra={
                "event": "book_persisted",
                "book": book.code,
                "chapters": outcome.chapter_count,
                "tokens": outcome.token_count,
                "output_file": outcome.output_path,
            },
        )
    except Exception as exc:  # noqa: BLE001
        outcome.status = BookStatus.FAILED
        outcome.failed_stage = stage
        outcome.error = str(exc)
        log_exc_info = not isinstance(exc, MorphGNTError)
        logger.error(
            "ERROR processing %s: %s",
            book.name,
            exc,
            exc_info=log_exc_info,
            extra={"event": "book_failed", "book": book.code, "stage": stage},
        )
    finally:
        outcome.duration_seconds = round(time.monotonic() - started, 2)
    return outcome


def build_corpus(
    catalog: Sequence[BookDescriptor],
    fetcher: Fetcher,
    store: BookStore,
    *,
    force: bool = False,
    exists: ExistsPredicate | None = None,
    workers: int = 1,
) -> BuildResult:
    """Process every catalog entry and write the manifest.

    Args:
        catalog: Books to process, in manifest order.
        fetcher: Source of raw documents.
        store: Destination for book documents and the manifest.
        force: Re-fetch and overwrite books that already exist.
        exists: Existence predicate for the skip check (defaults to
            ``store.exists``).
        workers: Books processed concurrently; 1 processes them in order.

    Returns:
        A ``BuildResult``; check ``succeeded`` for the run-level verdict.

    Raises:
        StoreError: If the output directory cannot be created.
    """
    store.ensure_dir()
    books = list(catalog)
    logger.info(
        "Building MorphGNT data files for %s book(s) into %s",
        len(books),
        store.out_dir.as_posix(),
        extra={"event": "build_start", "books": len(books), "force": force, "workers": workers},
    )

    def _run(book: BookDescriptor) -> BookOutcome:
        return process_book(book, fetcher, store, force=force, exists=exists)

    if workers <= 1 or len(books) <= 1:
        outcomes = [_run(book) for book in books]
    else:
        slots: List[BookOutcome | None] = [None] * len(books)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(_run, book): idx for idx, book in enumerate(books)}
            for future in as_completed(futures):
                slots[futures[future]] = future.result()
        outcomes = [o for o in slots if o is not None]

    result = BuildResult(outcomes=outcomes)

    entries = result.entries
    if entries:
        try:
            result.manifest_path = store.save_manifest(entries)
        except MorphGNTError as exc:
            result.manifest_error = str(exc)
            logger.error("ERROR writing manifest: %s", exc, extra={"event": "manifest_failed"})
        else:
            logger.info(
                "Wrote %s (%s books)",
                result.manifest_path.name,
                len(entries),
                extra={"event": "manifest_written", "books": len(entries), "output_file": result.manifest_path},
            )

    if result.error_count:
        logger.error(
            "%s book(s) failed. Run with --force to retry.",
            result.error_count,
            extra={"event": "build_complete", "status": "FAILED", "errors": result.error_count},
        )
    else:
        logger.info("Done.", extra={"event": "build_complete", "status": "SUCCESS", "errors": 0})
    return result


__all__ = [
    "BookStatus",
    "BookOutcome",
    "BookFailure",
    "BuildResult",
    "process_book",
    "build_corpus",
]
