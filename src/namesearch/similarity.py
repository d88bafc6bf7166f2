from __future__ import annotations
from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance over code points."""
    return Levenshtein.distance(a or "", b or "")


def similarity(a: str, b: str) -> float:
    """
    1 - edit_distance(a, b) / max(len(a), len(b)), in [0, 1].
    Symmetric; two empty strings are identical (1.0). Non-strings count as empty.
    """
    a = a if isinstance(a, str) else ""
    b = b if isinstance(b, str) else ""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / longest
