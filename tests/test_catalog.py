from __future__ import annotations

import json

import pytest

from morphgnt.catalog import NT_BOOKS, BookDescriptor, build_catalog, get_book, load_catalog
from morphgnt.errors import BookNotFoundError, CatalogError


def test_default_catalog_lists_new_testament_in_order():
    assert len(NT_BOOKS) == 27
    assert [b.number for b in NT_BOOKS] == list(range(61, 88))
    assert NT_BOOKS[0].code == "MAT"
    assert NT_BOOKS[-1] == BookDescriptor(87, "87-Re-morphgnt.txt", "REV", "Revelation")


def test_default_catalog_codes_unique_and_filenames_numbered():
    codes = [b.code for b in NT_BOOKS]
    assert len(set(codes)) == len(codes)
    assert all(len(code) == 3 for code in codes)
    for book in NT_BOOKS:
        assert book.filename.startswith(f"{book.number}-")
        assert book.filename.endswith("-morphgnt.txt")


def test_descriptors_are_immutable():
    with pytest.raises(AttributeError):
        NT_BOOKS[0].code = "XXX"


def test_get_book():
    assert get_book("JHN").name == "John"
    with pytest.raises(BookNotFoundError):
        get_book("GEN")


def test_load_catalog_skips_malformed_and_duplicate_entries(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {"number": 64, "filename": "64-Jn-morphgnt.txt", "code": "JHN", "name": "John"},
                {"number": 64, "filename": "dup.txt", "code": "JHN", "name": "Duplicate"},
                {"number": "x", "filename": "f.txt", "code": "BAD", "name": "Bad"},
                {"filename": "f.txt", "code": "MIS", "name": "Missing number"},
                ["not", "an", "object"],
                {"number": 86, "filename": "86-Jud-morphgnt.txt", "code": "JUD", "name": "Jude"},
            ]
        ),
        encoding="utf-8",
    )
    books = load_catalog(path)
    assert [b.code for b in books] == ["JHN", "JUD"]
    assert books[0].filename == "64-Jn-morphgnt.txt"


def test_load_catalog_errors(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.json")

    not_list = tmp_path / "object.json"
    not_list.write_text("{}", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(not_list)

    invalid = tmp_path / "invalid.json"
    invalid.write_text("[", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(invalid)

    empty = tmp_path / "empty.json"
    empty.write_text("[]", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(empty)


def test_build_catalog_accepts_descriptors():
    books = build_catalog([NT_BOOKS[3], NT_BOOKS[3], NT_BOOKS[0]])
    assert [b.code for b in books] == ["JHN", "MAT"]
