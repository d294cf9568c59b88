"""Exception hierarchy shared by the corpus builder modules."""

from __future__ import annotations


class MorphGNTError(Exception):
    """Base exception for corpus builder errors."""


class ConfigError(MorphGNTError):
    """Raised when configuration loading or validation fails."""


class CatalogError(MorphGNTError):
    """Raised when a book catalog cannot be loaded."""


class BookNotFoundError(CatalogError):
    """Raised when a requested book code is missing from the catalog."""


class TransferError(MorphGNTError):
    """Raised when a source document cannot be retrieved."""

    def __init__(self, location: str, status: int | None = None, reason: str | None = None) -> None:
        self.location = location
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"HTTP {status} fetching {location}"
        else:
            message = f"Failed to fetch {location}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ParseError(MorphGNTError):
    """Raised when a fetched document yields no chapters."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Parsed 0 chapters from {source}; check the file format")


class StoreError(MorphGNTError):
    """Raised when a persisted document cannot be read or written."""


__all__ = [
    "MorphGNTError",
    "ConfigError",
    "CatalogError",
    "BookNotFoundError",
    "TransferError",
    "ParseError",
    "StoreError",
]
