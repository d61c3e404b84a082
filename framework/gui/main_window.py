"""
framework/gui/main_window.py
============================

Root window with a navigation bar for the two views (signing and contract
generation), a display area and a status bar.
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import Frame, Label, Button, X, LEFT
from typing import Callable, Dict, Optional

from export.logic.export_service import ExportService
from layout.gui.contract_view import ContractView
from signature.gui.signing_view import SigningView
from signature.logic.signing_session import SigningSession

logger = logging.getLogger(__name__)


class MainWindow(tk.Tk):
    """Main window; a view is rebuilt every time it is selected."""

    # ------------------------------------------------------------------ #
    # Constructor                                                       #
    # ------------------------------------------------------------------ #
    def __init__(self, *, export_service: Optional[ExportService] = None) -> None:
        super().__init__()

        self.title("DocSign")
        self.geometry("1100x750")

        # State
        self.export_service = export_service or ExportService()
        self.session = SigningSession()
        self.active_view: Optional[tk.Widget] = None

        # ---------- Frames ---------------------------------------------
        self.nav_frame = Frame(self, height=40, bg="#dddddd")
        self.nav_frame.pack(side="top", fill=X)

        self.nav_buttons_frame = Frame(self.nav_frame, bg="#dddddd")
        self.nav_buttons_frame.pack(side=LEFT)

        self.display_area = Frame(self, bg="white")
        self.display_area.pack(fill="both", expand=True)

        self.status_bar = Label(self, text="Welcome", anchor="w", bg="#eeeeee")
        self.status_bar.pack(side="bottom", fill=X)

        # ---------- Buttons --------------------------------------------
        self.views: Dict[str, Callable[[], tk.Widget]] = {
            "Sign document": self._make_signing_view,
            "Contract": self._make_contract_view,
        }
        for label, factory in self.views.items():
            Button(self.nav_buttons_frame, text=label, padx=12, pady=2,
                   command=lambda f=factory, lb=label: self.load_view(lb, f)
                   ).pack(side=LEFT, padx=5, pady=5)

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self.load_view("Sign document", self._make_signing_view)

    # ------------------------------------------------------------------ #
    # Views                                                              #
    # ------------------------------------------------------------------ #
    def clear_display_area(self) -> None:
        for widget in self.display_area.winfo_children():
            widget.destroy()
        self.active_view = None

    def load_view(self, label: str, factory: Callable[[], tk.Widget]) -> None:
        self.clear_display_area()
        self.active_view = factory()
        self.active_view.pack(fill="both", expand=True)
        self.set_status(label)
        logger.debug("Loaded view %s", label)

    def _make_signing_view(self) -> tk.Widget:
        # a fresh session per view; the old one is closed with its view
        self.session = SigningSession()
        return SigningView(self.display_area, session=self.session,
                           export_service=self.export_service, status=self.set_status)

    def _make_contract_view(self) -> tk.Widget:
        return ContractView(self.display_area, export_service=self.export_service,
                            status=self.set_status)

    def set_status(self, message: str) -> None:
        self.status_bar.config(text=message)

    def _on_close(self) -> None:
        self.clear_display_area()
        self.destroy()
