from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

@dataclass(frozen=True)
class Row:
    page: int                 # 1-based PDF page
    raw_text: str             # extracted line, never rewritten
    mapped_text: str          # raw_text with taught mappings applied
    normalized_text: str      # mapped_text after normalize()

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "raw_text": self.raw_text,
            "mapped_text": self.mapped_text,
            "normalized_text": self.normalized_text,
        }

class Stage(str, Enum):
    """Cascade stage that produced a result set."""
    RAW = "raw"
    NORMALIZED = "normalized"
    FUZZY = "fuzzy"
    SIMILARITY = "similarity"
    NONE = "none"

@dataclass
class SearchResult:
    rows: List[Row] = field(default_factory=list)
    stage: Stage = Stage.NONE

    def __bool__(self) -> bool:
        return bool(self.rows)

@dataclass(frozen=True)
class Hit:
    row: Row
    score: float              # 0 = perfect, lower is better
    start: int                # match offset inside row.normalized_text

@dataclass(frozen=True)
class Suggestion:
    garbled: str
    correct: str
    similarity: float
    page: int

    def to_dict(self) -> dict:
        return {
            "garbled": self.garbled,
            "correct": self.correct,
            "similarity": self.similarity,
            "page": self.page,
        }

def maybe_dict(s: Optional[Suggestion]) -> Optional[dict]:
    return s.to_dict() if s is not None else None
