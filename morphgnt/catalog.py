"""Static catalog of MorphGNT source documents.

The default catalog lists the 27 New Testament books in canonical order using
the MorphGNT numbering (61 = Matthew, 87 = Revelation). Alternative catalogs
(for fixtures or partial builds) can be loaded from a JSON file containing a
list of ``{"number", "filename", "code", "name"}`` objects.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

from .errors import BookNotFoundError, CatalogError

logger = logging.getLogger(__name__)

CATALOG_FIELDS = ("number", "filename", "code", "name")


@dataclass(frozen=True)
class BookDescriptor:
    """Immutable description of one source document."""

    number: int
    filename: str
    code: str
    name: str


NT_BOOKS: tuple[BookDescriptor, ...] = (
    BookDescriptor(61, "61-Mt-morphgnt.txt", "MAT", "Matthew"),
    BookDescriptor(62, "62-Mk-morphgnt.txt", "MRK", "Mark"),
    BookDescriptor(63, "63-Lk-morphgnt.txt", "LUK", "Luke"),
    BookDescriptor(64, "64-Jn-morphgnt.txt", "JHN", "John"),
    BookDescriptor(65, "65-Ac-morphgnt.txt", "ACT", "Acts"),
    BookDescriptor(66, "66-Ro-morphgnt.txt", "ROM", "Romans"),
    BookDescriptor(67, "67-1Co-morphgnt.txt", "1CO", "1 Corinthians"),
    BookDescriptor(68, "68-2Co-morphgnt.txt", "2CO", "2 Corinthians"),
    BookDescriptor(69, "69-Ga-morphgnt.txt", "GAL", "Galatians"),
    BookDescriptor(70, "70-Eph-morphgnt.txt", "EPH", "Ephesians"),
    BookDescriptor(71, "71-Php-morphgnt.txt", "PHP", "Philippians"),
    BookDescriptor(72, "72-Col-morphgnt.txt", "COL", "Colossians"),
    BookDescriptor(73, "73-1Th-morphgnt.txt", "1TH", "1 Thessalonians"),
    BookDescriptor(74, "74-2Th-morphgnt.txt", "2TH", "2 Thessalonians"),
    BookDescriptor(75, "75-1Ti-morphgnt.txt", "1TI", "1 Timothy"),
    BookDescriptor(76, "76-2Ti-morphgnt.txt", "2TI", "2 Timothy"),
    BookDescriptor(77, "77-Tit-morphgnt.txt", "TIT", "Titus"),
    BookDescriptor(78, "78-Phm-morphgnt.txt", "PHM", "Philemon"),
    BookDescriptor(79, "79-Heb-morphgnt.txt", "HEB", "Hebrews"),
    BookDescriptor(80, "80-Jas-morphgnt.txt", "JAS", "James"),
    BookDescriptor(81, "81-1Pe-morphgnt.txt", "1PE", "1 Peter"),
    BookDescriptor(82, "82-2Pe-morphgnt.txt", "2PE", "2 Peter"),
    BookDescriptor(83, "83-1Jn-morphgnt.txt", "1JN", "1 John"),
    BookDescriptor(84, "84-2Jn-morphgnt.txt", "2JN", "2 John"),
    BookDescriptor(85, "85-3Jn-morphgnt.txt", "3JN", "3 John"),
    BookDescriptor(86, "86-Jud-morphgnt.txt", "JUD", "Jude"),
    BookDescriptor(87, "87-Re-morphgnt.txt", "REV", "Revelation"),
)


def get_book(code: str, catalog: Sequence[BookDescriptor] = NT_BOOKS) -> BookDescriptor:
    """Return the descriptor for ``code``."""
    for book in catalog:
        if book.code == code:
            return book
    raise BookNotFoundError(f"Book code {code!r} not found")


def _normalize_entry(entry: Any, index: int) -> BookDescriptor | None:
    """Validate a single raw catalog entry."""
    if not isinstance(entry, dict):
        logger.warning("Skipping malformed catalog entry at index %s: %r", index, entry)
        return None

    missing = [name for name in CATALOG_FIELDS if name not in entry]
    if missing:
        logger.warning(
            "Skipping catalog entry at index %s: missing field(s) %s",
            index,
            ", ".join(missing),
        )
        return None

    number = entry["number"]
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        logger.warning("Skipping catalog entry at index %s: invalid book number %r", index, number)
        return None

    texts: list[str] = []
    for name in ("filename", "code", "name"):
        value = entry[name]
        if not isinstance(value, str) or not value.strip():
            logger.warning("Skipping catalog entry at index %s: invalid %s %r", index, name, value)
            return None
        texts.append(value.strip())

    filename, code, name = texts
    return BookDescriptor(number=number, filename=filename, code=code, name=name)


def build_catalog(entries: Iterable[Any]) -> tuple[BookDescriptor, ...]:
    """Normalize raw entries into an ordered catalog, dropping duplicate codes."""
    books: list[BookDescriptor] = []
    seen: set[str] = set()
    for idx, entry in enumerate(entries):
        book = entry if isinstance(entry, BookDescriptor) else _normalize_entry(entry, idx)
        if book is None:
            continue
        if book.code in seen:
            logger.warning("Duplicate book code %s; keeping first occurrence", book.code)
            continue
        seen.add(book.code)
        books.append(book)

    if not books:
        raise CatalogError("No valid entries found in catalog data.")
    return tuple(books)


def load_catalog(path: str | Path) -> tuple[BookDescriptor, ...]:
    """Read and validate a catalog JSON file."""
    catalog_path = Path(path).expanduser()
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file not found at {catalog_path}")
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Invalid JSON in {catalog_path}: {exc}") from exc
    except OSError as exc:
        raise CatalogError(f"Unable to read {catalog_path}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogError(f"Expected a list at top level, found {type(raw).__name__}")

    books = build_catalog(raw)
    logger.debug("Loaded %s books from %s", len(books), catalog_path)
    return books


__all__ = ["BookDescriptor", "NT_BOOKS", "get_book", "build_catalog", "load_catalog"]
