"""
Retrieve raw MorphGNT source documents.

Two fetchers share the same ``fetch(locator) -> str`` contract:

- ``HttpFetcher`` downloads ``<base_url>/<locator>`` (by default the raw
  files of the morphgnt/sblgnt GitHub repository).
- ``LocalFetcher`` reads ``<source_dir>/<locator>`` from a local clone.

Neither retries. A failed retrieval raises ``TransferError`` carrying the
location and, for HTTP responses, the status code; the builder records it and
moves on to the next book.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import requests

from .config import BuilderConfig
from .errors import TransferError

logger = logging.getLogger(__name__)

SOURCE_ENCODING = "utf-8"


class Fetcher(Protocol):
    def location(self, locator: str) -> str: ...

    def fetch(self, locator: str) -> str: ...


class HttpFetcher:
    """Fetch source documents over HTTP with a shared ``requests`` session."""

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def location(self, locator: str) -> str:
        return f"{self.base_url}/{locator.lstrip('/')}"

    def fetch(self, locator: str) -> str:
        url = self.location(locator)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            # Connection errors and timeouts have no HTTP status
            raise TransferError(url, None, str(exc)) from exc

        if not resp.ok:
            raise TransferError(
                url,
                resp.status_code,
                "check that the file exists at this path in the morphgnt/sblgnt repository",
            )

        resp.encoding = SOURCE_ENCODING
        logger.debug("Fetched %s (%s bytes)", url, len(resp.content))
        return resp.text


class LocalFetcher:
    """Read source documents from a local checkout of the corpus."""

    def __init__(self, source_dir: str | Path) -> None:
        self.source_dir = Path(source_dir).expanduser()

    def location(self, locator: str) -> str:
        return (self.source_dir / locator).as_posix()

    def fetch(self, locator: str) -> str:
        path = self.source_dir / locator
        if not path.is_file():
            raise TransferError(path.as_posix(), None, "file not found")
        try:
            return path.read_text(encoding=SOURCE_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise TransferError(path.as_posix(), None, str(exc)) from exc


def make_fetcher(config: BuilderConfig, session: requests.Session | None = None) -> Fetcher:
    """Return a local fetcher when a source directory is configured, else HTTP."""
    if config.source_dir is not None:
        logger.debug("Reading sources from local directory %s", config.source_dir)
        return LocalFetcher(config.source_dir)
    return HttpFetcher(config.base_url, timeout=config.timeout, session=session)


__all__ = ["Fetcher", "HttpFetcher", "LocalFetcher", "make_fetcher"]
