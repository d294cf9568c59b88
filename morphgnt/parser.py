"""
Parse MorphGNT text into a chapter -> verse -> tokens structure.

Each source line holds seven space-separated fields:

    BBCCVV POS PARSING TEXT WORD NORMALIZED LEMMA

``BBCCVV`` is a compact reference (two digits each for book, chapter and
verse), e.g. ``040101`` is John 1:1. Only text, lemma, pos and parsing are
kept; the word and normalized forms are dropped to keep the output small.

Malformed lines (fewer than seven fields, a short or non-numeric reference)
are skipped silently. Upstream corpora contain occasional irregular lines and
they must never abort a book.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .errors import ParseError

MIN_FIELDS = 7
REFERENCE_LENGTH = 6


@dataclass(frozen=True)
class Token:
    """One tagged word occurrence."""

    text: str
    lemma: str
    pos: str
    parsing: str

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "lemma": self.lemma, "pos": self.pos, "parsing": self.parsing}


Verses = Dict[str, List[Token]]
Chapters = Dict[str, Verses]


def parse_reference(ref: str) -> Tuple[str, str]:
    """Return canonical (chapter, verse) keys for a ``BBCCVV`` reference.

    Leading zeros are stripped, so ``"040108"`` yields ``("1", "8")``.
    Raises ``ValueError`` for short or non-numeric references.
    """
    if len(ref) < REFERENCE_LENGTH:
        raise ValueError(f"Reference code too short: {ref!r}")
    chapter_digits = ref[2:4]
    verse_digits = ref[4:6]
    if not (chapter_digits.isdigit() and verse_digits.isdigit()):
        raise ValueError(f"Reference code is not numeric: {ref!r}")
    return str(int(chapter_digits)), str(int(verse_digits))


def parse_line(line: str) -> Tuple[str, str, Token] | None:
    """Parse one source line, returning None for blank or malformed lines."""
    trimmed = line.strip()
    if not trimmed:
        return None

    parts = trimmed.split(" ")
    if len(parts) < MIN_FIELDS:
        return None

    ref, pos, parsing, text, _word, _normalized, lemma = parts[:MIN_FIELDS]
    try:
        chapter, verse = parse_reference(ref)
    except ValueError:
        return None
    return chapter, verse, Token(text=text, lemma=lemma, pos=pos, parsing=parsing)


def parse_morphgnt(raw: str) -> Chapters:
    """Parse a whole MorphGNT document. May return an empty mapping."""
    chapters: Chapters = {}
    for line in raw.split("\n"):
        parsed = parse_line(line)
        if parsed is None:
            continue
        chapter, verse, token = parsed
        chapters.setdefault(chapter, {}).setdefault(verse, []).append(token)
    return chapters


def parse_book(raw: str, source: str) -> Chapters:
    """Parse a document and raise ``ParseError`` if it yields no chapters."""
    chapters = parse_morphgnt(raw)
    if not chapters:
        raise ParseError(source)
    return chapters


def count_chapters(chapters: Chapters) -> int:
    return len(chapters)


def count_tokens(chapters: Chapters) -> int:
    return sum(len(tokens) for verses in chapters.values() for tokens in verses.values())


__all__ = [
    "Token",
    "Chapters",
    "Verses",
    "parse_reference",
    "parse_line",
    "parse_morphgnt",
    "parse_book",
    "count_chapters",
    "count_tokens",
]
