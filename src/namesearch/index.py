from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz

from . import config as CFG
from .mapping import apply_mapping
from .models import Hit, Row
from .normalize import normalize

log = logging.getLogger(__name__)


class FuzzyIndex:
    """
    Approximate-substring index over Row.normalized_text.

    Score per row is 0 (perfect) .. 1 (unrelated):
      * base     = 1 - best partial alignment ratio of query vs. row text
      * location = start / distance, added only when ignore_location is False
    Rows scoring above `threshold` are not returned. Hits come back best first,
    ties in row order.
    """

    def __init__(
        self,
        *,
        threshold: float = CFG.INDEX_THRESHOLD,
        distance: int = CFG.INDEX_DISTANCE,
        ignore_location: bool = CFG.IGNORE_LOCATION,
        fixes: Optional[Iterable[Tuple[str, str]]] = None,
    ) -> None:
        self.threshold = float(threshold)
        self.distance = int(distance)
        self.ignore_location = bool(ignore_location)
        # query side must normalize exactly like the rows did
        self.fixes = tuple(CFG.SEED_FIXES if fixes is None else fixes)
        self._rows: List[Row] = []

    # ---- Build ----
    def build(self, rows: Sequence[Row]) -> None:
        self._rows = list(rows)

    def __len__(self) -> int:
        return len(self._rows)

    # ---- Query ----
    def normalize_query(self, query: str) -> str:
        return normalize(query, self.fixes)

    def score(self, query_norm: str, text: str) -> Optional[Tuple[float, int]]:
        """(score, match start) for one row, or None if nothing aligns."""
        if not query_norm or not text:
            return None
        al = fuzz.partial_ratio_alignment(query_norm, text)
        if al is None:
            return None
        score = 1.0 - al.score / 100.0
        start = int(al.dest_start)
        if not self.ignore_location:
            if self.distance <= 0:
                score = 1.0 if start else score
            else:
                score += start / self.distance
        return score, start

    def search(self, query_norm: str) -> List[Hit]:
        if not query_norm:
            return []
        hits: List[Hit] = []
        for row in self._rows:
            res = self.score(query_norm, row.normalized_text)
            if res is None:
                continue
            sc, start = res
            if sc <= self.threshold:
                hits.append(Hit(row=row, score=sc, start=start))
        hits.sort(key=lambda h: h.score)
        return hits


def make_row(page: int, raw_text: str, mapping: Dict[str, str], fixes: Optional[Iterable[Tuple[str, str]]] = None) -> Row:
    mapped = apply_mapping(raw_text, mapping)
    return Row(page=int(page), raw_text=raw_text, mapped_text=mapped, normalized_text=normalize(mapped, fixes))


def build_index(
    raw_rows: Iterable[Tuple[int, str]],
    mapping: Dict[str, str],
    *,
    threshold: float = CFG.INDEX_THRESHOLD,
    distance: int = CFG.INDEX_DISTANCE,
    ignore_location: bool = CFG.IGNORE_LOCATION,
    fixes: Optional[Iterable[Tuple[str, str]]] = None,
) -> Tuple[FuzzyIndex, List[Row]]:
    """
    Materialize Rows from (page, raw_text) pairs and index them.
    Always starts from raw_text, so mapping changes never compound.
    """
    fixes = tuple(CFG.SEED_FIXES if fixes is None else fixes)
    rows = [make_row(page, text, mapping, fixes) for page, text in raw_rows]
    idx = FuzzyIndex(threshold=threshold, distance=distance, ignore_location=ignore_location, fixes=fixes)
    idx.build(rows)
    log.info("Index rebuilt: rows=%d mappings=%d", len(rows), len(mapping))
    return idx, rows
