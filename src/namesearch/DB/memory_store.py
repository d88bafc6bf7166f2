# namesearch/DB/memory_store.py
from __future__ import annotations
from typing import Dict, Optional


class MemoryBackend:
    """In-process mapping table (tests or throwaway sessions)."""
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Optional[Dict[str, str]] = dict(initial) if initial is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, str]]:
        return dict(self._data) if self._data is not None else None

    def save(self, mapping: Dict[str, str]) -> None:
        self._data = dict(mapping)
        self.saves += 1

    def close(self) -> None:
        pass
