from __future__ import annotations
import logging
import os
import re
from typing import Iterable, List, Tuple

import fitz  # PyMuPDF

from . import config as CFG
from .errors import DecodeError

log = logging.getLogger(__name__)

_SPLIT = re.compile(CFG.LINE_SPLIT)


def split_lines(page_text: str) -> List[str]:
    """Split one page's text into rows; many PDFs lose newlines, so dandas and double spaces split too."""
    return [ln.strip() for ln in _SPLIT.split(page_text or "") if ln.strip()]


def _iter_page_rows(doc: "fitz.Document") -> Iterable[Tuple[int, str]]:
    for pno, page in enumerate(doc, start=1):
        for line in split_lines(page.get_text("text")):
            yield pno, line


def decode(data: bytes) -> List[Tuple[int, str]]:
    """
    Extract ordered (page, line) rows from PDF bytes.
    Raises DecodeError with a readable message on any failure; never returns partial rows.
    """
    if not data:
        raise DecodeError("The document is empty.")
    try:
        doc = fitz.open(stream=bytes(data), filetype="pdf")
    except Exception as exc:
        raise DecodeError(f"Could not open PDF: {exc}") from exc

    try:
        if doc.needs_pass:
            raise DecodeError("The PDF is password protected.")
        if doc.page_count == 0:
            raise DecodeError("The PDF has no pages.")
        pages = doc.page_count
        rows = list(_iter_page_rows(doc))
    except DecodeError:
        raise
    except Exception as exc:
        raise DecodeError(f"Text extraction failed: {exc}") from exc
    finally:
        doc.close()

    log.info("Decoded PDF: pages=%d rows=%d", pages, len(rows))
    return rows


def decode_path(path: str) -> List[Tuple[int, str]]:
    if not os.path.isfile(path):
        raise DecodeError(f"The PDF file does not exist: {path}")
    with open(path, "rb") as f:
        return decode(f.read())
