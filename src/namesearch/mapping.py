from __future__ import annotations
import json
import logging
import threading
from typing import Callable, Dict, Optional

from .DB.api import MappingBackend, make_backend
from .errors import PersistenceError
from .normalize import replace_literal

log = logging.getLogger(__name__)


def apply_mapping(text: str, mapping: Dict[str, str]) -> str:
    """Substitute every garbled key in `text`, longest key first at each position."""
    return replace_literal(text or "", mapping.items())


def _sanitize(payload: object) -> Dict[str, str]:
    """Keep only non-empty str -> non-empty str entries; anything else becomes {}."""
    if not isinstance(payload, dict):
        if payload is not None:
            log.warning("Discarding mapping data of type %s", type(payload).__name__)
        return {}
    clean: Dict[str, str] = {}
    for k, v in payload.items():
        if isinstance(k, str) and isinstance(v, str) and k and v:
            clean[k] = v
        else:
            log.warning("Discarding malformed mapping entry %r -> %r", k, v)
    return clean


class MappingStore:
    """
    User-taught garbled -> correct substitutions, persisted through a MappingBackend.

    The in-memory table is authoritative: persistence failures are logged and
    dropped, and the next successful save carries every earlier mutation.
    Mutations are serialized on `lock`, which stays held while `on_change`
    (the session's index rebuild) runs.
    """

    def __init__(
        self,
        backend: Optional[MappingBackend] = None,
        *,
        dsn: Optional[str] = None,
        on_change: Optional[Callable[[Dict[str, str]], None]] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        if backend is None:
            backend = make_backend(dsn or "memory://")
        self._backend = backend
        self._on_change = on_change
        self._lock = lock if lock is not None else threading.RLock()
        self._mapping: Dict[str, str] = {}

    # ------------- persistence -------------

    def load(self) -> Dict[str, str]:
        """Read the persisted table; missing or corrupt data yields {}. Never raises."""
        with self._lock:
            try:
                payload = self._read()
            except PersistenceError as exc:
                log.warning("Mapping load failed, starting empty: %s", exc)
                payload = None
            self._mapping = _sanitize(payload)
            log.info("Loaded %d mapping(s)", len(self._mapping))
            return dict(self._mapping)

    def save(self) -> bool:
        """Persist the full table; returns False (after logging) on failure."""
        with self._lock:
            try:
                self._write(dict(self._mapping))
            except PersistenceError as exc:
                log.warning("Mapping save failed (kept in memory): %s", exc)
                return False
            return True

    def _read(self) -> object:
        try:
            return self._backend.load()
        except Exception as exc:
            raise PersistenceError(f"load: {exc}") from exc

    def _write(self, mapping: Dict[str, str]) -> None:
        try:
            self._backend.save(mapping)
        except Exception as exc:
            raise PersistenceError(f"save: {exc}") from exc

    # ------------- queries -------------

    @property
    def mapping(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, garbled: object) -> bool:
        return garbled in self._mapping

    def apply(self, text: str) -> str:
        with self._lock:
            return apply_mapping(text, self._mapping)

    # ------------- mutations -------------

    def teach(self, garbled: str, correct: str) -> bool:
        """Insert/overwrite garbled -> correct. Empty (or non-str) arguments are a no-op."""
        if not isinstance(garbled, str) or not isinstance(correct, str):
            return False
        garbled, correct = garbled.strip(), correct.strip()
        if not garbled or not correct:
            return False
        with self._lock:
            self._mapping[garbled] = correct
            log.info("Taught mapping %r -> %r", garbled, correct)
            self._committed()
        return True

    def remove(self, garbled: str) -> bool:
        """Delete a mapping; unknown keys are a no-op."""
        if not isinstance(garbled, str):
            return False
        with self._lock:
            key = garbled if garbled in self._mapping else garbled.strip()
            if key not in self._mapping:
                return False
            del self._mapping[key]
            log.info("Removed mapping %r", key)
            self._committed()
        return True

    def import_json(self, text: str) -> int:
        """
        Merge a JSON object of garbled -> correct pairs. Malformed payloads raise
        ValueError and leave the table untouched. Returns the number of entries merged.
        """
        try:
            payload = json.loads(text)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ValueError(f"mapping import is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError("mapping import must be a JSON object")
        incoming: Dict[str, str] = {}
        for k, v in payload.items():
            if not isinstance(v, str) or not k.strip() or not v.strip():
                raise ValueError(f"invalid mapping entry {k!r} -> {v!r}")
            incoming[k.strip()] = v.strip()
        if not incoming:
            return 0
        with self._lock:
            self._mapping.update(incoming)
            log.info("Imported %d mapping(s)", len(incoming))
            self._committed()
        return len(incoming)

    def export_json(self) -> str:
        with self._lock:
            return json.dumps(self._mapping, ensure_ascii=False, indent=2, sort_keys=True)

    def close(self) -> None:
        self._backend.close()

    # ------------- internals -------------

    def _committed(self) -> None:
        # caller holds the lock: persist, then let the session rebuild
        self.save()
        if self._on_change is not None:
            self._on_change(dict(self._mapping))
