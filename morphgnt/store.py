"""
Filesystem persistence for built book documents and the manifest.

Layout under ``out_dir``:
    <CODE>.json   compact {chapter: {verse: [token, ...]}} per book
    books.json    [{"code", "name", "chapters"}, ...] in catalog order

Every write goes to a temporary sibling first and is then moved into place,
so an interrupted run never leaves a truncated document behind for the
skip-if-exists check to trust.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .errors import StoreError
from .parser import Chapters, Token

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "books.json"
BOOK_SUFFIX = ".json"


@dataclass(frozen=True)
class ManifestEntry:
    """One book listed in ``books.json``."""

    code: str
    name: str
    chapter_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "name": self.name, "chapters": self.chapter_count}


def chapters_to_json(chapters: Chapters) -> Dict[str, Dict[str, List[Dict[str, str]]]]:
    return {
        chapter: {verse: [token.to_dict() for token in tokens] for verse, tokens in verses.items()}
        for chapter, verses in chapters.items()
    }


def _write_atomic(path: Path, text: str) -> None:
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise StoreError(f"Unable to write {path}: {exc}") from exc


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise StoreError(f"{path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise StoreError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise StoreError(f"Unable to read {path}: {exc}") from exc


class BookStore:
    """Read and write book documents and the manifest in one directory."""

    def __init__(self, out_dir: str | Path) -> None:
        self.out_dir = Path(out_dir)

    @property
    def manifest_path(self) -> Path:
        return self.out_dir / MANIFEST_FILENAME

    def ensure_dir(self) -> None:
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Unable to create output directory {self.out_dir}: {exc}") from exc

    def path_for(self, code: str) -> Path:
        return self.out_dir / f"{code}{BOOK_SUFFIX}"

    def exists(self, code: str) -> bool:
        return self.path_for(code).is_file()

    def save_book(self, code: str, chapters: Chapters) -> Path:
        path = self.path_for(code)
        text = json.dumps(chapters_to_json(chapters), ensure_ascii=False, separators=(",", ":"))
        _write_atomic(path, text)
        logger.debug("Wrote %s (%s bytes)", path, len(text.encode("utf-8")))
        return path

    def _load_raw_book(self, code: str) -> Dict[str, Any]:
        path = self.path_for(code)
        data = _read_json(path)
        if not isinstance(data, dict):
            raise StoreError(f"{path} should contain an object mapping chapter -> verses")
        return data

    def read_chapter_count(self, code: str) -> int:
        """Chapter count of an already persisted document."""
        return len(self._load_raw_book(code))

    def load_book(self, code: str) -> Chapters:
        path = self.path_for(code)
        data = self._load_raw_book(code)
        chapters: Chapters = {}
        try:
            for chapter, verses in data.items():
                chapters[chapter] = {
                    verse: [
                        Token(
                            text=item["text"],
                            lemma=item["lemma"],
                            pos=item["pos"],
                            parsing=item["parsing"],
                        )
                        for item in tokens
                    ]
                    for verse, tokens in verses.items()
                }
        except (AttributeError, KeyError, TypeError) as exc:
            raise StoreError(f"Malformed book document {path}: {exc}") from exc
        return chapters

    def save_manifest(self, entries: Sequence[ManifestEntry]) -> Path:
        path = self.manifest_path
        text = json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False)
        _write_atomic(path, text)
        return path

    def load_manifest(self) -> List[ManifestEntry]:
        path = self.manifest_path
        data = _read_json(path)
        if not isinstance(data, list):
            raise StoreError(f"{path} should contain a list of book entries")
        try:
            return [
                ManifestEntry(code=item["code"], name=item["name"], chapter_count=int(item["chapters"]))
                for item in data
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Malformed manifest {path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"BookStore(out_dir={self.out_dir.as_posix()})"


__all__ = ["BookStore", "ManifestEntry", "chapters_to_json", "MANIFEST_FILENAME"]
