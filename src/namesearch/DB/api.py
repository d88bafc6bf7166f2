# namesearch/DB/api.py
from __future__ import annotations
from typing import Dict, Optional, Protocol

from .json_store import JsonFileBackend
from .sqlite_store import SQLiteBackend


class MappingBackend(Protocol):
    # Read the whole table; None when nothing has been stored yet
    def load(self) -> Optional[Dict[str, str]]: ...
    # Replace the whole table; may raise (OSError, sqlite3.Error, ...)
    def save(self, mapping: Dict[str, str]) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_backend(dsn: str) -> MappingBackend:
    """
    Factory:
      - json:///path   -> JsonFileBackend (one JSON object per file)
      - sqlite:///path -> SQLiteBackend   (mappings table)
      - memory://      -> MemoryBackend   (process lifetime only)
    """
    if dsn.startswith("json:///"):
        return JsonFileBackend(dsn.removeprefix("json:///"))

    if dsn.startswith("sqlite:///"):
        return SQLiteBackend(dsn.removeprefix("sqlite:///"))

    if dsn.startswith("memory://"):
        from .memory_store import MemoryBackend
        return MemoryBackend()

    raise ValueError(f"Unsupported mapping store DSN: {dsn}")
