"""Presentation layers (Flask UI, CLI) on top of namesearch.Engine."""
from __future__ import annotations
import logging
import os
from typing import Optional

from namesearch import DecodeError, Engine

def create_engine(mappings_dsn: Optional[str] = None,
                  pdf: Optional[str] = None,
                  verbose: bool = False,
                  use_seed_fixes: bool = True) -> Engine:
    """
    Build an Engine the way both front ends need it:
      1) logging (INFO when verbose),
      2) mapping store from DSN (config default when None),
      3) optional PDF loaded from disk (DecodeError propagates).
    """
    if verbose:
        logging.basicConfig(level=logging.INFO)
    eng = Engine(mappings_dsn=mappings_dsn, fixes=None if use_seed_fixes else ())
    if pdf:
        if not os.path.isfile(pdf):
            raise DecodeError(f"The PDF file does not exist: {pdf}")
        with open(pdf, "rb") as f:
            eng.load_document(f.read())
    return eng
