"""
signature/gui/signing_view.py

Tk view for stamping text signatures onto an opened PDF.
The canvas shows the rendered page; annotations are painted from the
overlay snapshots only. Renders and exports run off the UI thread and
report back through after().
"""
from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from typing import Optional

from PIL import Image, ImageTk

from core.exceptions import ConfigurationError, DocSignError, LoadError
from export.logic.export_service import ExportService
from ..logic.hit_testing import delete_handle, resize_handle
from ..logic.signing_session import SigningSession
from ..models.interaction_state import InteractionMode
from ..models.overlay_snapshot import OverlaySnapshot

logger = logging.getLogger(__name__)

_SURFACE = "page"
_SIG_FONT_FAMILY = "Times"


class SigningView(ttk.Frame):
    """
    Toolbar:  [Open PDF…]  Signature: [______]  [Clear]  [Download signed]  [<] 1/3 [>]
    Canvas:   press on empty space places the typed text, press on a mark
              selects it, drag moves, the lower right handle resizes and the
              upper right one deletes.
    """

    def __init__(self, parent, *, session: Optional[SigningSession] = None,
                 export_service: Optional[ExportService] = None, status=None, **kwargs):
        super().__init__(parent, **kwargs)
        self._session = session or SigningSession()
        self._export = export_service or ExportService()
        self._status = status
        self._label = tk.StringVar(value="")
        self._page_text = tk.StringVar(value="–")
        self._page_photo: Optional[ImageTk.PhotoImage] = None
        self._snapshot: Optional[OverlaySnapshot] = None
        self._exporting = False

        self._label.trace_add("write", lambda *_: self._on_label_changed())
        self._make_ui()
        self.bind("<Destroy>", self._on_destroy, add="+")

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=12, pady=8)

        self._open_btn = ttk.Button(bar, text="Open PDF…", command=self._browse)
        self._open_btn.pack(side="left")
        ttk.Label(bar, text="Signature:").pack(side="left", padx=(12, 4))
        ttk.Entry(bar, textvariable=self._label, width=28).pack(side="left")
        self._clear_btn = ttk.Button(bar, text="Clear", command=self._clear)
        self._clear_btn.pack(side="left", padx=(6, 0))
        self._download_btn = ttk.Button(bar, text="Download signed", command=self._download)
        self._download_btn.pack(side="left", padx=(6, 0))

        ttk.Button(bar, text=">", width=3, command=self._next).pack(side="right")
        ttk.Label(bar, textvariable=self._page_text).pack(side="right", padx=6)
        ttk.Button(bar, text="<", width=3, command=self._previous).pack(side="right")

        holder = ttk.Frame(self)
        holder.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        holder.rowconfigure(0, weight=1)
        holder.columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(holder, bg="#808080", highlightthickness=0)
        vbar = ttk.Scrollbar(holder, orient="vertical", command=self._canvas.yview)
        hbar = ttk.Scrollbar(holder, orient="horizontal", command=self._canvas.xview)
        self._canvas.configure(yscrollcommand=vbar.set, xscrollcommand=hbar.set)
        self._canvas.grid(row=0, column=0, sticky="nsew")
        vbar.grid(row=0, column=1, sticky="ns")
        hbar.grid(row=1, column=0, sticky="ew")

        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<B1-Motion>", self._on_motion)
        self._canvas.bind("<ButtonRelease-1>", lambda _e: self._overlay_call("release"))
        self._canvas.bind("<Leave>", lambda _e: self._overlay_call("leave"))

        self._update_buttons()

    # ------------------------------------------------------------------ Document
    def _browse(self) -> None:
        p = filedialog.askopenfilename(parent=self, filetypes=[("PDF", "*.pdf")],
                                       title="Choose PDF")
        if p:
            self.open_path(p)

    def open_path(self, path: str) -> None:
        if self._exporting:
            return
        previous = self._session.overlay if self._session.is_open else None
        try:
            self._session.open_file(path)
        except (LoadError, ConfigurationError) as ex:
            messagebox.showerror("Cannot open document", str(ex), parent=self)
            return
        if previous is not None:
            previous.unsubscribe(self._on_snapshot)
        self._page_photo = None
        overlay = self._session.overlay
        overlay.subscribe(self._on_snapshot)
        overlay.set_pending_label(self._label.get())
        self._request_render()
        self._set_status(f"Opened {self._session.source_name}")

    # ------------------------------------------------------------------ Rendering
    def _request_render(self) -> None:
        scheduler = self._session.scheduler
        if scheduler is None:
            return
        page = self._session.page_index
        scale = self._session.overlay.scale
        scheduler.request(
            _SURFACE, page, scale,
            on_done=lambda idx, img: self.after(0, self._show_page, idx, img),
            on_error=lambda idx, e: self.after(0, self._render_failed, idx, e),
        )

    def _show_page(self, page_index: int, image: Image.Image) -> None:
        if not self._session.is_open or page_index != self._session.page_index:
            return
        self._page_photo = ImageTk.PhotoImage(image)
        self._paint()

    def _render_failed(self, page_index: int, error: Exception) -> None:
        logger.error("Rendering page %d failed: %s", page_index, error)
        self._set_status(f"Page {page_index + 1} could not be rendered")

    def _on_snapshot(self, snapshot: OverlaySnapshot) -> None:
        self._snapshot = snapshot
        self._paint()

    def _paint(self) -> None:
        c = self._canvas
        c.delete("all")
        snap = self._snapshot
        if snap is None:
            self._update_buttons()
            return
        c.configure(scrollregion=(0, 0, snap.canvas_width, snap.canvas_height))
        if self._page_photo is not None:
            c.create_image(0, 0, image=self._page_photo, anchor="nw")

        for ann in snap.annotations:
            c.create_text(ann.canvas_x, ann.canvas_y, text=ann.text, anchor="sw",
                          font=(_SIG_FONT_FAMILY, -max(1, int(round(ann.size))), "italic"),
                          fill="#1a1a66")
            if ann.id == snap.selected_id:
                box = ann.bounds()
                c.create_rectangle(box.left, box.top, box.right, box.bottom,
                                   outline="#3b82f6", dash=(4, 2))
                hs = self._session.overlay.settings.handle_size
                d = delete_handle(box, hs)
                c.create_oval(d.left, d.top, d.right, d.bottom, fill="#dc2626", outline="")
                c.create_text((d.left + d.right) / 2, (d.top + d.bottom) / 2, text="×",
                              fill="white")
                r = resize_handle(box, hs)
                c.create_rectangle(r.left, r.top, r.right, r.bottom, fill="#3b82f6", outline="")

        self._page_text.set(f"{snap.page_index + 1}/{self._session.page_count}")
        self._update_buttons()

    # ------------------------------------------------------------------ Pointer
    def _canvas_point(self, event) -> tuple:
        return self._canvas.canvasx(event.x), self._canvas.canvasy(event.y)

    def _on_press(self, event) -> None:
        if not self._session.is_open:
            return
        x, y = self._canvas_point(event)
        mode = self._session.overlay.press(x, y)
        if mode == InteractionMode.IDLE and not self._label.get():
            self._set_status("Type a signature first, then click the page")

    def _on_motion(self, event) -> None:
        if self._session.is_open:
            self._session.overlay.move(*self._canvas_point(event))

    def _overlay_call(self, name: str) -> None:
        if self._session.is_open:
            getattr(self._session.overlay, name)()

    def _on_label_changed(self) -> None:
        if self._session.is_open:
            self._session.overlay.set_pending_label(self._label.get())

    # ------------------------------------------------------------------ Commands
    def _next(self) -> None:
        if self._session.is_open:
            self._page_photo = None
            self._session.next_page()
            self._request_render()

    def _previous(self) -> None:
        if self._session.is_open:
            self._page_photo = None
            self._session.previous_page()
            self._request_render()

    def _clear(self) -> None:
        if self._session.is_open and len(self._session.overlay):
            if messagebox.askyesno("Clear", "Remove all placed signatures?", parent=self):
                self._session.overlay.clear()

    def _download(self) -> None:
        if not self._session.is_open or self._exporting:
            return
        job = self._export.prepare_stamp(self._session)
        self._exporting = True
        self._update_buttons()
        self._set_status("Exporting…")
        self._export.submit(
            lambda: self._export.stamp_signatures(job),
            on_success=lambda path: self.after(0, self._export_done, path, None),
            on_error=lambda err: self.after(0, self._export_done, None, err),
        )

    def _export_done(self, path: Optional[str], error: Optional[DocSignError]) -> None:
        self._exporting = False
        self._update_buttons()
        if error is not None:
            self._set_status("Export failed")
            messagebox.showerror("Export failed", str(error), parent=self)
            return
        self._set_status(f"Saved {path}")
        messagebox.showinfo("Done", f"Signed file created:\n{path}", parent=self)

    # ------------------------------------------------------------------ Helpers
    def _update_buttons(self) -> None:
        has_marks = self._session.is_open and len(self._session.overlay) > 0
        state = "normal" if has_marks and not self._exporting else "disabled"
        self._download_btn.configure(state=state)
        self._clear_btn.configure(state="normal" if has_marks else "disabled")
        self._open_btn.configure(state="disabled" if self._exporting else "normal")

    def _set_status(self, message: str) -> None:
        if callable(self._status):
            self._status(message)

    def _on_destroy(self, event) -> None:
        if event.widget is self and self._session.is_open:
            self._session.overlay.unsubscribe(self._on_snapshot)
            self._session.close()
