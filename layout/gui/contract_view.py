"""
layout/gui/contract_view.py

Contract preview: shows the paginated contract as plain text per page and
generates the PDF in the background.
"""
from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from typing import Optional

from core.exceptions import DocSignError, LoadError
from export.logic.export_service import ExportService
from ..models.document_spec import DocumentSpec
from ..models.page import Page
from ..models.sample_contract import SAMPLE_CONTRACT

logger = logging.getLogger(__name__)


class ContractView(ttk.Frame):
    def __init__(self, parent, *, export_service: Optional[ExportService] = None,
                 status=None, **kwargs):
        super().__init__(parent, **kwargs)
        self._export = export_service or ExportService()
        self._status = status
        self._spec = DocumentSpec.from_dict(SAMPLE_CONTRACT)
        self._busy = False
        self._make_ui()
        self._refresh_preview()

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=12, pady=8)
        ttk.Button(bar, text="Load data…", command=self._browse).pack(side="left")
        self._subject = ttk.Label(bar, text="")
        self._subject.pack(side="left", padx=12)
        self._generate_btn = ttk.Button(bar, text="Generate PDF", command=self._generate)
        self._generate_btn.pack(side="right")

        self._text = tk.Text(self, wrap="none", font=("Times", 11), state="disabled")
        self._text.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))

    def _browse(self) -> None:
        p = filedialog.askopenfilename(parent=self, filetypes=[("JSON", "*.json")],
                                       title="Choose contract data")
        if not p:
            return
        try:
            with open(p, "r", encoding="utf-8") as fh:
                self._spec = DocumentSpec.from_json(fh.read())
        except (OSError, LoadError) as ex:
            messagebox.showerror("Cannot load contract data", str(ex), parent=self)
            return
        self._refresh_preview()

    # ------------------------------------------------------------------ Preview
    def _refresh_preview(self) -> None:
        pages = self._export.layout_contract(self._spec)
        self._subject.configure(
            text=f"{self._spec.header.employee_name} · {len(pages)} page(s)")
        self._text.configure(state="normal")
        self._text.delete("1.0", "end")
        for page in pages:
            self._text.insert("end", _page_as_text(page))
        self._text.configure(state="disabled")

    # ------------------------------------------------------------------ Export
    def _generate(self) -> None:
        if self._busy:
            return
        self._busy = True
        self._generate_btn.configure(state="disabled")
        spec = self._spec
        self._export.submit(
            lambda: self._export.generate_contract(spec),
            on_success=lambda path: self.after(0, self._done, path, None),
            on_error=lambda err: self.after(0, self._done, None, err),
        )

    def _done(self, path: Optional[str], error: Optional[DocSignError]) -> None:
        self._busy = False
        self._generate_btn.configure(state="normal")
        if error is not None:
            messagebox.showerror("Export failed", str(error), parent=self)
            return
        if callable(self._status):
            self._status(f"Saved {path}")
        messagebox.showinfo("Done", f"Contract created:\n{path}", parent=self)


def _page_as_text(page: Page) -> str:
    out = [f"──── page {page.index + 1} ────\n"]
    for line in page.lines:
        indent = " " * int(line.x // 6)
        out.append(f"{indent}{line.text}\n")
    out.append("\n")
    return "".join(out)
