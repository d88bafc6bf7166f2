# app.py
# CustomTkinter GUI for PDF name search (dark theme).
# - Choose a PDF; it is decoded on a background thread (keeps UI responsive).
# - Live search with debounce; results show page + corrected line.
# - Teach / remove corrections, ask for a suggestion; event log pane.

from __future__ import annotations
import os
from typing import List, Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

# Project imports (ensure PYTHONPATH=src or pip install -e .)
from namesearch import DecodeError, Engine, Row


# -------------------- small helpers --------------------

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


def format_row(r: Row) -> str:
    return f"page {r.page:<4} | {r.mapped_text}"


# -------------------- main app --------------------

class NameSearchApp(ctk.CTk):
    """Dark-themed GUI that loads a PDF and searches names in its (possibly garbled) text."""

    def __init__(self, engine: Optional[Engine] = None) -> None:
        super().__init__()

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        self.title("PDF Name Search")
        self.geometry("940x720")
        self.minsize(820, 600)

        # State
        self.engine = engine or Engine()
        self._search_after_id: Optional[str] = None
        self._current_label: str = "No PDF selected"

        # Fonts
        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_text = ctk.CTkFont(family="Noto Sans Devanagari, Mangal, Nirmala UI", size=14)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)  # results
        self.grid_rowconfigure(5, weight=1)  # log

        self._build_header()
        self._build_source_bar()
        self._build_search()
        self._build_results()
        self._build_teach()
        self._build_log()

        self._set_status("Ready")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        ctk.CTkLabel(header, text="PDF Name Search", font=self.font_title).grid(
            row=0, column=0, sticky="w", padx=12, pady=10
        )

    def _build_source_bar(self) -> None:
        bar = ctk.CTkFrame(self, corner_radius=10)
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(1, weight=1)

        ctk.CTkButton(bar, text="Choose PDF", command=self._choose_pdf).grid(row=0, column=0, padx=(12, 6), pady=10)

        self.lbl_source = ctk.CTkLabel(bar, text=self._current_label, anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=1, sticky="ew", padx=6, pady=10)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate", determinate_speed=1.2)
        self.progress.grid(row=0, column=2, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(bar, text="Status: -", anchor="e")
        self.lbl_status.grid(row=0, column=3, sticky="e", padx=12, pady=10)

    def _build_search(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(box, text="Search name:", font=self.font_label).grid(row=0, column=0, sticky="w", padx=12, pady=10)
        self.entry_query = ctk.CTkEntry(box, placeholder_text="प्रेमबाई, जयराम …", font=self.font_text)
        self.entry_query.grid(row=0, column=1, sticky="ew", padx=(6, 12), pady=10)
        self.entry_query.bind("<KeyRelease>", self._on_query_changed)

    def _build_results(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=6)
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(1, weight=1)

        self.lbl_results = ctk.CTkLabel(frame, text="Results", font=self.font_label)
        self.lbl_results.grid(row=0, column=0, sticky="w", padx=12, pady=(10, 2))

        self.txt_results = ctk.CTkTextbox(frame, wrap="word", font=self.font_text)
        self.txt_results.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self.txt_results.configure(state="disabled")
        self._set_results("(no results yet: choose a PDF and start typing)")

    def _build_teach(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=4, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure((0, 1), weight=1)

        self.entry_garbled = ctk.CTkEntry(box, placeholder_text="Garbled text (as extracted)", font=self.font_text)
        self.entry_garbled.grid(row=0, column=0, sticky="ew", padx=(12, 6), pady=10)
        self.entry_correct = ctk.CTkEntry(box, placeholder_text="Correct text", font=self.font_text)
        self.entry_correct.grid(row=0, column=1, sticky="ew", padx=6, pady=10)

        ctk.CTkButton(box, text="Teach", width=80, command=self._teach).grid(row=0, column=2, padx=6, pady=10)
        ctk.CTkButton(box, text="Remove", width=80, command=self._remove).grid(row=0, column=3, padx=6, pady=10)
        ctk.CTkButton(box, text="Suggest", width=80, command=self._suggest).grid(row=0, column=4, padx=(6, 12), pady=10)

    def _build_log(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=5, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(frame, text="Event log", font=self.font_label).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 2))
        self.txt_log = ctk.CTkTextbox(frame, height=110, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self._log(f"GUI ready. {len(self.engine.mappings)} taught mapping(s) loaded.")

    # --------- loading pipeline (threaded) ---------

    def _choose_pdf(self) -> None:
        path = fd.askopenfilename(title="Choose PDF", filetypes=[("PDF files", "*.pdf"), ("All files", "*.*")])
        if not path:
            return
        if self.engine.loading:
            mb.showinfo("Loading", "A PDF is already loading. Please wait.")
            return
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as exc:
            mb.showerror("Load error", f"Could not read file:\n{exc}")
            return

        self._current_label = shorten_path(os.path.basename(path))
        self.lbl_source.configure(text=self._current_label)
        self._set_status("Extracting…")
        self.progress.start()
        self._log(f"Loading PDF: {path}")
        self.engine.load_document_async(data, on_done=lambda exc: self.after(0, lambda: self._on_load_done(exc)))

    def _on_load_done(self, exc: Optional[Exception]) -> None:
        self.progress.stop()
        if exc is None:
            self._set_status(f"Rows indexed: {self.engine.row_count:,}")
            self._log(f"PDF ready ({self.engine.row_count} rows).")
            self.entry_query.focus_set()
            self._do_search()
            return
        self._set_status("Error while reading PDF.")
        msg = exc.message if isinstance(exc, DecodeError) else repr(exc)
        self._log(f"ERROR: {msg}")
        mb.showerror("Load error", f"Error reading PDF:\n{msg}")

    # --------- search ---------

    def _on_query_changed(self, _ev=None) -> None:
        if self._search_after_id is not None:
            self.after_cancel(self._search_after_id)
        self._search_after_id = self.after(160, self._do_search)

    def _do_search(self) -> None:
        self._search_after_id = None
        q = self.entry_query.get()
        if not q.strip():
            self._set_results("")
            return
        if self.engine.loading:
            self._set_results("(still extracting…)")
            return
        rows: List[Row] = self.engine.set_query(q)
        self.lbl_results.configure(text=f"Results ({len(rows)}) | stage: {self.engine.last_stage.value}")
        self._set_results("\n".join(format_row(r) for r in rows) if rows else "No matches")

    # --------- mappings ---------

    def _teach(self) -> None:
        g, c = self.entry_garbled.get(), self.entry_correct.get()
        if self.engine.teach(g, c):
            self._log(f"Taught: {g.strip()} → {c.strip()}")
            self._do_search()
        else:
            self._log("Teach ignored: both fields are required.")

    def _remove(self) -> None:
        g = self.entry_garbled.get()
        if self.engine.remove_mapping(g):
            self._log(f"Removed mapping: {g.strip()}")
            self._do_search()
        else:
            self._log(f"No mapping for: {g.strip()!r}")

    def _suggest(self) -> None:
        text = self.entry_correct.get()
        s = self.engine.suggest_mapping(text)
        if s is None:
            self._log("No confident suggestion.")
            return
        ok = mb.askyesno(
            "Suggested mapping",
            f"Page {s.page}:\n{s.garbled}\n→ {s.correct}\n(similarity {s.similarity:.0%})\n\nTeach this mapping?",
        )
        if ok:
            self.engine.teach(s.garbled, s.correct)
            self._log(f"Taught (suggested): {s.garbled} → {s.correct}")
            self._do_search()

    # --------- misc UI helpers ---------

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    def _set_results(self, text: str) -> None:
        self.txt_results.configure(state="normal")
        self.txt_results.delete("0.0", "end")
        if text:
            self.txt_results.insert("end", text)
        self.txt_results.configure(state="disabled")

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        self.engine.shutdown()
        self.destroy()


if __name__ == "__main__":
    app = NameSearchApp()
    app.mainloop()
