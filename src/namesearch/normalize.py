from __future__ import annotations
import re
import unicodedata
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from . import config as CFG

_CONTROL = re.compile(r"[\u0000-\u001F\u007F-\u009F]")
_OUTSIDE_SCRIPT = re.compile(
    "[^" + CFG.SCRIPT_RANGE[0] + "-" + CFG.SCRIPT_RANGE[1] + r"\s" + re.escape(CFG.EXTRA_CHARS) + "]"
)
_SPACES = re.compile(r"\s+")
_REPEATS = re.compile(r"(.)\1{2,}")

# seed targets contain no seed key, so one pass settles them; the cap bounds
# caller-supplied tables whose replacements feed each other or cycle
_MAX_PASSES = 4


def replace_literal(text: str, pairs: Iterable[Tuple[str, str]]) -> str:
    """
    Replace every occurrence of every key with its value, scanning left to right.
      * keys are plain substrings (no patterns, nothing to escape)
      * at each position the LONGEST matching key wins
      * substituted text is emitted as-is and never re-scanned
    Empty keys are ignored.
    """
    table: Dict[str, str] = {}
    for k, v in pairs:
        if k:
            table[k] = v
    if not text or not table:
        return text or ""

    # bucket keys by first char, longest first
    by_head: Dict[str, List[str]] = defaultdict(list)
    for k in sorted(table, key=len, reverse=True):
        by_head[k[0]].append(k)

    out: List[str] = []
    i, n = 0, len(text)
    while i < n:
        for k in by_head.get(text[i], ()):
            if text.startswith(k, i):
                out.append(table[k])
                i += len(k)
                break
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _canonicalize(s: str) -> str:
    s = unicodedata.normalize("NFC", s)
    s = _CONTROL.sub(" ", s)
    s = _OUTSIDE_SCRIPT.sub(" ", s)
    s = _SPACES.sub(" ", s).strip()
    # triple+ repeats are treated as extraction noise; legitimate doubles survive
    return _REPEATS.sub(r"\1\1", s)


def normalize(text: object, fixes: Optional[Iterable[Tuple[str, str]]] = None) -> str:
    """
    Canonicalize extracted text for comparison.
    Rules (in order):
      * NFC composition
      * C0/C1 control characters -> space
      * anything outside the Devanagari block, whitespace, dandas and dashes -> space
      * collapse whitespace runs, trim
      * runs of 3+ identical characters -> exactly 2
      * seed garble fixes (config.SEED_FIXES unless `fixes` is given; () disables)
    Total: non-strings and empty input give "".
    """
    if not text or not isinstance(text, str):
        return ""
    pairs = tuple(CFG.SEED_FIXES if fixes is None else fixes)

    s = _canonicalize(text)
    if not pairs:
        return s
    for _ in range(_MAX_PASSES):
        fixed = _canonicalize(replace_literal(s, pairs))
        if fixed == s:
            break
        s = fixed
    return s


def normalize_query(query: object, fixes: Optional[Iterable[Tuple[str, str]]] = None) -> tuple[str, str]:
    """Return (whitespace-trimmed raw query, normalized query)."""
    if not isinstance(query, str):
        return "", ""
    raw = query.strip()
    return raw, normalize(raw, fixes)
