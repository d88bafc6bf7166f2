"""Approximate name search over PDFs whose text layer is garbled."""
from __future__ import annotations

from .engine import Engine
from .errors import DecodeError, NameSearchError, PersistenceError
from .index import FuzzyIndex, build_index
from .mapping import MappingStore, apply_mapping
from .models import Hit, Row, SearchResult, Stage, Suggestion
from .normalize import normalize, replace_literal
from .search import search, suggest
from .similarity import edit_distance, similarity

__all__ = [
    "Engine",
    "DecodeError", "NameSearchError", "PersistenceError",
    "FuzzyIndex", "build_index",
    "MappingStore", "apply_mapping",
    "Hit", "Row", "SearchResult", "Stage", "Suggestion",
    "normalize", "replace_literal",
    "search", "suggest",
    "edit_distance", "similarity",
]
