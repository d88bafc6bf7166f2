# namesearch/DB/sqlite_store.py
from __future__ import annotations
import os
import sqlite3
from typing import Dict, Optional

_SCHEMA = """
CREATE TABLE IF NOT EXISTS mappings (
  garbled TEXT PRIMARY KEY,
  correct TEXT NOT NULL
);
"""

class SQLiteBackend:
    """
    Mapping table in a single SQLite table; save() rewrites it in one transaction.
    The connection is opened on first load()/save(), so a bad file surfaces as a
    load/save error rather than from the constructor.
    """
    def __init__(self, db_path: str) -> None:
        self.db_path = os.path.abspath(os.path.expanduser(db_path))
        self.conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> sqlite3.Connection:
        if self.conn is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            try:
                conn.executescript(_SCHEMA)
            except sqlite3.Error:
                conn.close()
                raise
            self.conn = conn
        return self.conn

    # ---- Read ----
    def load(self) -> Optional[Dict[str, str]]:
        rows = self._connect().execute("SELECT garbled, correct FROM mappings").fetchall()
        if not rows:
            return None
        return {g: c for g, c in rows}

    # ---- Replace ----
    def save(self, mapping: Dict[str, str]) -> None:
        conn = self._connect()
        with conn:
            conn.execute("DELETE FROM mappings")
            conn.executemany(
                "INSERT INTO mappings(garbled, correct) VALUES (?,?)",
                list(mapping.items()),
            )

    # ---- lifecycle ----
    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
