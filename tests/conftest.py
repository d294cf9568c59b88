from __future__ import annotations

import logging
import threading
from typing import Dict, List

import pytest
import requests

from morphgnt.catalog import BookDescriptor
from morphgnt.errors import TransferError
from morphgnt.reporting import LOGGER_NAME
from morphgnt.store import BookStore

MATTHEW_TEXT = (
    "010101 N- ----NSF- Βίβλος Βίβλος βίβλος βίβλος\n"
    "010101 N- ----GSF- γενέσεως γενέσεως γενέσεως γένεσις\n"
    "010102 N- ----NSM- Ἀβραὰμ Ἀβραὰμ Ἀβραάμ Ἀβραάμ\n"
    "010201 RA ----GSM- τοῦ τοῦ τοῦ ὁ\n"
)
MARK_TEXT = (
    "020101 N- ----NSF- Ἀρχὴ Ἀρχὴ ἀρχή ἀρχή\n"
    "020201 C- -------- καὶ καὶ καί καί\n"
    "020301 C- -------- καὶ καὶ καί καί\n"
)
LUKE_TEXT = "030101 C- -------- Ἐπειδήπερ Ἐπειδήπερ ἐπειδήπερ ἐπειδήπερ\n"

SAMPLE_BOOKS = (
    BookDescriptor(61, "61-Mt-morphgnt.txt", "MAT", "Matthew"),
    BookDescriptor(62, "62-Mk-morphgnt.txt", "MRK", "Mark"),
    BookDescriptor(63, "63-Lk-morphgnt.txt", "LUK", "Luke"),
)
SAMPLE_SOURCES = {
    "61-Mt-morphgnt.txt": MATTHEW_TEXT,
    "62-Mk-morphgnt.txt": MARK_TEXT,
    "63-Lk-morphgnt.txt": LUKE_TEXT,
}


class FakeFetcher:
    """In-memory fetcher; values that are exceptions are raised on fetch."""

    def __init__(self, sources: Dict[str, object]) -> None:
        self.sources = dict(sources)
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def location(self, locator: str) -> str:
        return f"memory://{locator}"

    def fetch(self, locator: str) -> str:
        with self._lock:
            self.calls.append(locator)
        value = self.sources.get(locator)
        if value is None:
            raise TransferError(self.location(locator), 404)
        if isinstance(value, Exception):
            raise value
        return str(value)


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.encoding: str | None = "ISO-8859-1"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8")


class FakeSession:
    """Stands in for ``requests.Session``; records each GET."""

    def __init__(self, responses: Dict[str, object]) -> None:
        self.responses = responses
        self.requests: List[tuple] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.requests.append((url, timeout))
        value = self.responses.get(url)
        if value is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def store(tmp_path) -> BookStore:
    return BookStore(tmp_path / "out")


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(SAMPLE_SOURCES)
