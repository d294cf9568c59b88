"""MorphGNT corpus builder: per-book chapter/verse JSON from the SBLGNT morphology."""

from __future__ import annotations

from .builder import BookOutcome, BookStatus, BuildResult, build_corpus, process_book
from .catalog import NT_BOOKS, BookDescriptor, get_book, load_catalog
from .config import BuilderConfig, load_config
from .errors import (
    BookNotFoundError,
    CatalogError,
    ConfigError,
    MorphGNTError,
    ParseError,
    StoreError,
    TransferError,
)
from .fetcher import HttpFetcher, LocalFetcher, make_fetcher
from .morphology import describe_parsing, split_word_punct
from .parser import Token, parse_book, parse_line, parse_morphgnt, parse_reference
from .store import BookStore, ManifestEntry

__version__ = "0.1.0"

__all__ = [
    "BookDescriptor",
    "NT_BOOKS",
    "get_book",
    "load_catalog",
    "BuilderConfig",
    "load_config",
    "HttpFetcher",
    "LocalFetcher",
    "make_fetcher",
    "Token",
    "parse_reference",
    "parse_line",
    "parse_morphgnt",
    "parse_book",
    "BookStore",
    "ManifestEntry",
    "BookStatus",
    "BookOutcome",
    "BuildResult",
    "process_book",
    "build_corpus",
    "describe_parsing",
    "split_word_punct",
    "MorphGNTError",
    "ConfigError",
    "CatalogError",
    "BookNotFoundError",
    "TransferError",
    "ParseError",
    "StoreError",
]
