# namesearch/engine.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from . import config as CFG
from . import loader
from .DB.api import MappingBackend, make_backend
from .errors import DecodeError
from .index import FuzzyIndex, build_index
from .mapping import MappingStore
from .models import Row, SearchResult, Stage, Suggestion
from .search import search, suggest

log = logging.getLogger(__name__)


class Engine:
    """
    One document session. It owns:
      - the raw (page, text) rows of the loaded PDF (never rewritten),
      - the materialized Rows + FuzzyIndex derived from them,
      - the MappingStore (outlives documents; persisted via a backend).

    Every mapping mutation rebuilds Rows + index from the raw rows, under the
    same lock, before the next mutation or load can proceed.

    Public API (used by CLI/Flask/GUI):
      * load_document(data) / load_document_async(data, on_done) / load_rows(rows)
      * set_query(text) -> list[Row]
      * teach(garbled, correct), remove_mapping(garbled), suggest_mapping(text)
      * import_mappings(json_text), export_mappings()
      * state(): snapshot for rendering
      * shutdown()
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        mappings_dsn: Optional[str] = None,    # "json:///path", "sqlite:///path" or "memory://"
        backend: Optional[MappingBackend] = None,
        fixes: Optional[Iterable[Tuple[str, str]]] = None,   # None -> config.SEED_FIXES, () -> off
        index_threshold: Optional[float] = None,
        index_distance: Optional[int] = None,
        ignore_location: Optional[bool] = None,
        fuzzy_accept: Optional[float] = None,
        similarity_accept: Optional[float] = None,
        suggest_min: Optional[float] = None,
    ) -> None:
        self.fixes = tuple(CFG.SEED_FIXES if fixes is None else fixes)
        self.index_threshold = CFG.INDEX_THRESHOLD if index_threshold is None else float(index_threshold)
        self.index_distance = CFG.INDEX_DISTANCE if index_distance is None else int(index_distance)
        self.ignore_location = CFG.IGNORE_LOCATION if ignore_location is None else bool(ignore_location)
        self.fuzzy_accept = CFG.FUZZY_ACCEPT if fuzzy_accept is None else float(fuzzy_accept)
        self.similarity_accept = CFG.SIMILARITY_ACCEPT if similarity_accept is None else float(similarity_accept)
        self.suggest_min = CFG.SUGGEST_MIN if suggest_min is None else float(suggest_min)

        self._lock = threading.RLock()
        self._load_gate = threading.Lock()

        self._raw_rows: List[Tuple[int, str]] = []
        self.rows: List[Row] = []
        self.index: Optional[FuzzyIndex] = None

        self.loading: bool = False
        self.query: str = ""
        self.results: List[Row] = []
        self.last_stage: Stage = Stage.NONE
        self.last_error: Optional[str] = None

        if backend is None:
            backend = make_backend(mappings_dsn or CFG.MAPPINGS_DSN)
        self.mappings = MappingStore(backend, on_change=self._on_mappings_changed, lock=self._lock)
        self.mappings.load()
        self._rebuild()

    # ------------- documents -------------

    def load_document(self, data: bytes) -> int:
        """
        Decode PDF bytes and replace the current document. Returns the row count.
        On DecodeError the previous rows/index stay in place and last_error is set.
        """
        if not self._load_gate.acquire(blocking=False):
            raise RuntimeError("A document is already loading.")
        try:
            return self._load_locked(data)
        finally:
            self._load_gate.release()

    def load_document_async(
        self,
        data: bytes,
        on_done: Optional[Callable[[Optional[Exception]], None]] = None,
    ) -> threading.Thread:
        """Run load_document on a daemon thread; on_done(None | exc) fires when it settles."""
        if not self._load_gate.acquire(blocking=False):
            raise RuntimeError("A document is already loading.")
        self.loading = True

        def worker() -> None:
            err: Optional[Exception] = None
            try:
                self._load_locked(data)
            except DecodeError as exc:
                err = exc
            except Exception as exc:
                log.exception("Unexpected error while loading document")
                self.last_error = str(exc)
                err = exc
            finally:
                self._load_gate.release()
            if on_done is not None:
                on_done(err)

        t = threading.Thread(target=worker, name="namesearch-load", daemon=True)
        t.start()
        return t

    def load_rows(self, rows: Iterable[Tuple[int, str]]) -> int:
        """Install already-extracted (page, text) rows as the current document."""
        raw = [(int(p), str(t)) for p, t in rows]
        with self._lock:
            self._install(raw)
        return len(raw)

    def _load_locked(self, data: bytes) -> int:
        self.loading = True
        try:
            raw = loader.decode(data)
        except DecodeError as exc:
            self.last_error = exc.message
            log.warning("Document load failed: %s", exc.message)
            raise
        finally:
            self.loading = False
        with self._lock:
            self._install(raw)
        return len(raw)

    def _install(self, raw: List[Tuple[int, str]]) -> None:
        self._raw_rows = raw
        self.query = ""
        self.results = []
        self.last_stage = Stage.NONE
        self.last_error = None
        self._rebuild()
        log.info("Document loaded: rows=%d", len(raw))

    # ------------- query -------------

    def set_query(self, text: str) -> List[Row]:
        """Run the cascade; the result list replaces the previous one."""
        with self._lock:
            self.query = text if isinstance(text, str) else ""
            if self.loading:
                res = SearchResult()
            else:
                res = search(
                    self.query, self.rows, self.index,
                    fuzzy_accept=self.fuzzy_accept,
                    similarity_accept=self.similarity_accept,
                    fixes=self.fixes,
                )
            self.results = res.rows
            self.last_stage = res.stage
            return list(res.rows)

    def search(self, text: str) -> SearchResult:
        """Read-only cascade run that leaves the observable result list alone."""
        with self._lock:
            return search(
                text, self.rows, self.index,
                fuzzy_accept=self.fuzzy_accept,
                similarity_accept=self.similarity_accept,
                fixes=self.fixes,
            )

    # ------------- mappings -------------

    def teach(self, garbled: str, correct: str) -> bool:
        return self.mappings.teach(garbled, correct)

    def remove_mapping(self, garbled: str) -> bool:
        return self.mappings.remove(garbled)

    def import_mappings(self, text: str) -> int:
        return self.mappings.import_json(text)

    def export_mappings(self) -> str:
        return self.mappings.export_json()

    def suggest_mapping(self, correct_text: str) -> Optional[Suggestion]:
        with self._lock:
            s = suggest(correct_text, self.rows, min_similarity=self.suggest_min, fixes=self.fixes)
        if s is not None:
            log.info("Suggested %r -> %r (similarity=%.2f, page %d)", s.garbled, s.correct, s.similarity, s.page)
        return s

    # ------------- observable state -------------

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def state(self) -> Dict[str, object]:
        with self._lock:
            return {
                "row_count": self.row_count,
                "loading": self.loading,
                "query": self.query,
                "stage": self.last_stage.value,
                "results": [r.to_dict() for r in self.results],
                "mappings": self.mappings.mapping,
                "last_error": self.last_error,
            }

    # ------------- teardown -------------

    def shutdown(self) -> None:
        with self._lock:
            try:
                self.mappings.close()
            finally:
                self._raw_rows = []
                self.rows = []
                self.index = None
                self.results = []
                log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _on_mappings_changed(self, _mapping: Dict[str, str]) -> None:
        # MappingStore calls this with the shared lock held
        self._rebuild()
        if self.query:
            self.set_query(self.query)

    def _rebuild(self) -> None:
        self.index, self.rows = build_index(
            self._raw_rows,
            self.mappings.mapping,
            threshold=self.index_threshold,
            distance=self.index_distance,
            ignore_location=self.ignore_location,
            fixes=self.fixes,
        )
