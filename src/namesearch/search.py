from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from . import config as CFG
from .index import FuzzyIndex
from .models import Row, SearchResult, Stage, Suggestion
from .normalize import normalize, normalize_query
from .similarity import similarity

log = logging.getLogger(__name__)

# Cascade: raw exact -> normalized exact -> fuzzy index -> similarity fallback.
# The first stage with any rows wins; later stages never run.


def _raw_exact(q_raw: str, rows: Sequence[Row]) -> List[Row]:
    return [r for r in rows if q_raw in (r.mapped_text or r.raw_text)]


def _normalized_exact(q_norm: str, rows: Sequence[Row]) -> List[Row]:
    return [r for r in rows if q_norm in r.normalized_text]


def _fuzzy(q_norm: str, index: Optional[FuzzyIndex], accept: float) -> List[Row]:
    if index is None:
        return []
    return [h.row for h in index.search(q_norm) if h.score <= accept]


def _ranked_by_similarity(q_norm: str, rows: Sequence[Row]) -> List[Tuple[float, Row]]:
    """(similarity, row) best first; sort is stable so ties keep document order."""
    scored = [(similarity(r.normalized_text, q_norm), r) for r in rows]
    scored.sort(key=lambda t: t[0], reverse=True)
    return scored


def search(
    query: str,
    rows: Sequence[Row],
    index: Optional[FuzzyIndex],
    *,
    fuzzy_accept: float = CFG.FUZZY_ACCEPT,
    similarity_accept: float = CFG.SIMILARITY_ACCEPT,
    fixes: Optional[Iterable[Tuple[str, str]]] = None,
) -> SearchResult:
    """
    Run the matching cascade for `query` over `rows`.
    Empty/whitespace queries and empty row sets return an empty result.
    `fixes` defaults to whatever the index was built with.
    """
    if fixes is None and index is not None:
        fixes = index.fixes
    q_raw, q_norm = normalize_query(query, fixes)
    if not q_raw or not rows:
        return SearchResult()

    found = _raw_exact(q_raw, rows)
    if found:
        return _done(query, found, Stage.RAW)

    # nothing of the query survives normalization: every row would "contain" ""
    if not q_norm:
        return _done(query, [], Stage.NONE)

    found = _normalized_exact(q_norm, rows)
    if found:
        return _done(query, found, Stage.NORMALIZED)

    found = _fuzzy(q_norm, index, fuzzy_accept)
    if found:
        return _done(query, found, Stage.FUZZY)

    found = [r for sim, r in _ranked_by_similarity(q_norm, rows) if sim >= similarity_accept]
    if found:
        return _done(query, found, Stage.SIMILARITY)

    return _done(query, [], Stage.NONE)


def _done(query: str, rows: List[Row], stage: Stage) -> SearchResult:
    log.debug("query %r answered by stage=%s rows=%d", query, stage.value, len(rows))
    return SearchResult(rows=rows, stage=stage)


def suggest(
    correct_text: str,
    rows: Sequence[Row],
    *,
    min_similarity: float = CFG.SUGGEST_MIN,
    fixes: Optional[Iterable[Tuple[str, str]]] = None,
) -> Optional[Suggestion]:
    """
    Propose which existing row a known-correct string is a garbled form of.
    Returns the single most similar row if it beats `min_similarity`, else None.
    Accepting it means teach(suggestion.garbled, suggestion.correct).
    """
    if not isinstance(correct_text, str) or not rows:
        return None
    correct = correct_text.strip()
    q_norm = normalize(correct, fixes)
    if not q_norm:
        return None

    sim, top = _ranked_by_similarity(q_norm, rows)[0]
    if sim <= min_similarity:
        return None
    return Suggestion(garbled=top.raw_text, correct=correct, similarity=sim, page=top.page)
