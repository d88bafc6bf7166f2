from __future__ import annotations


class NameSearchError(Exception):
    """Base class for errors raised by the name search core."""


class DecodeError(NameSearchError):
    """The PDF bytes could not be opened or their text could not be extracted."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PersistenceError(NameSearchError):
    """Loading or saving the mapping table failed. Never leaves MappingStore."""
