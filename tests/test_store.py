from __future__ import annotations

import json

import pytest

from morphgnt.errors import StoreError
from morphgnt.parser import Token, parse_morphgnt
from morphgnt.store import BookStore, ManifestEntry


def test_book_document_is_compact_utf8_json(store):
    store.ensure_dir()
    chapters = parse_morphgnt("0101011 N- ----NSM- λόγος λόγος λόγος λόγος\n")
    path = store.save_book("MAT", chapters)

    assert path.name == "MAT.json"
    assert path.read_text(encoding="utf-8") == (
        '{"1":{"1":[{"text":"λόγος","lemma":"λόγος","pos":"N-","parsing":"----NSM-"}]}}'
    )
    assert store.exists("MAT")
    assert not store.exists("MRK")


def test_load_book_returns_tokens(store):
    store.ensure_dir()
    chapters = parse_morphgnt("040101 P- -------- Ἐν Ἐν ἐν ἐν\n040201 C- -------- καὶ καὶ καί καί\n")
    store.save_book("JHN", chapters)

    loaded = store.load_book("JHN")
    assert loaded == chapters
    assert loaded["2"]["1"][0] == Token(text="καὶ", lemma="καί", pos="C-", parsing="--------")
    assert store.read_chapter_count("JHN") == 2


def test_save_leaves_no_temporary_files(store):
    store.ensure_dir()
    store.save_book("JHN", parse_morphgnt("040101 P- -------- Ἐν Ἐν ἐν ἐν\n"))
    store.save_manifest([ManifestEntry("JHN", "John", 1)])
    assert sorted(p.name for p in store.out_dir.iterdir()) == ["JHN.json", "books.json"]


def test_manifest_format(store):
    store.ensure_dir()
    entries = [ManifestEntry("MAT", "Matthew", 28), ManifestEntry("1CO", "1 Corinthians", 16)]
    path = store.save_manifest(entries)

    assert path.name == "books.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [
        {"code": "MAT", "name": "Matthew", "chapters": 28},
        {"code": "1CO", "name": "1 Corinthians", "chapters": 16},
    ]
    assert path.read_text(encoding="utf-8").startswith('[\n  {\n    "code": "MAT"')
    assert store.load_manifest() == entries


def test_corrupt_document_raises_store_error(store):
    store.ensure_dir()
    store.path_for("JHN").write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        store.read_chapter_count("JHN")

    store.path_for("JUD").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StoreError):
        store.read_chapter_count("JUD")

    store.path_for("PHM").write_text('{"1": {"1": [{"text": "x"}]}}', encoding="utf-8")
    with pytest.raises(StoreError):
        store.load_book("PHM")


def test_missing_document_and_manifest(store):
    with pytest.raises(StoreError):
        store.read_chapter_count("JHN")
    with pytest.raises(StoreError):
        store.load_manifest()


def test_ensure_dir_creates_nested_directories(tmp_path):
    store = BookStore(tmp_path / "public" / "data" / "morphgnt")
    store.ensure_dir()
    assert store.out_dir.is_dir()
