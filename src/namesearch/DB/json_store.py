# namesearch/DB/json_store.py
from __future__ import annotations
import json
import os
from typing import Any, Optional


class JsonFileBackend:
    """Mapping table as one UTF-8 JSON object on disk."""
    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(os.path.expanduser(path))

    def load(self) -> Optional[Any]:
        # Returns whatever the file decodes to; MappingStore validates the shape.
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None

    def save(self, mapping: dict) -> None:
        # write to a temp file then swap, so a crash never leaves half a table
        tmp = f"{self.path}.tmp"
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(mapping, f, ensure_ascii=False, indent=2, sort_keys=True)
        os.replace(tmp, self.path)

    def close(self) -> None:
        pass
