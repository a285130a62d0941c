import tkinter as tk
from typing import Callable

import customtkinter as ctk

from event_planner.core.services.vendor_filters import VendorFilters
from event_planner.ui.styles import theme

RATING_CHOICES = ["Any", "3.0+", "3.5+", "4.0+", "4.5+"]


def _parse_amount(raw: str, fallback: float) -> float:
    text = (raw or "").strip().replace(",", "")
    if not text:
        return fallback
    try:
        return max(0.0, float(text))
    except ValueError:
        return fallback


class FilterBar(ctk.CTkFrame):
    """
    Filter row above the vendor tabs: rating, price range, search, location.
    """

    def __init__(self, master: tk.Misc, filters: VendorFilters, on_change: Callable[..., None], on_reset: Callable[[], None]):
        super().__init__(master, fg_color="transparent")
        self._on_change = on_change
        self._defaults = filters
        self._updating = False

        self._rating_var = tk.StringVar(value=self._rating_label(filters.rating))
        self._min_var = tk.StringVar(value=f"{filters.price_min:.0f}")
        self._max_var = tk.StringVar(value=f"{filters.price_max:.0f}")
        self._search_var = tk.StringVar(value=filters.search)
        self._location_var = tk.StringVar(value=filters.location)

        ctk.CTkLabel(self, text="Rating").pack(side="left")
        rating = ctk.CTkComboBox(
            self,
            values=RATING_CHOICES,
            variable=self._rating_var,
            width=90,
            state="readonly",
            command=lambda _val: self._emit(),
        )
        rating.pack(side="left", padx=(4, 10))
        theme.style_combo_box(rating, theme.PALETTE)

        ctk.CTkLabel(self, text="Price").pack(side="left")
        ctk.CTkEntry(self, width=80, textvariable=self._min_var, justify="right").pack(side="left", padx=(4, 2))
        ctk.CTkLabel(self, text="to").pack(side="left")
        ctk.CTkEntry(self, width=80, textvariable=self._max_var, justify="right").pack(side="left", padx=(2, 10))

        ctk.CTkEntry(self, width=180, textvariable=self._search_var, placeholder_text="Search vendors").pack(side="left", padx=(0, 6))
        ctk.CTkEntry(self, width=120, textvariable=self._location_var, placeholder_text="Area").pack(side="left")

        ctk.CTkButton(self, text="Reset filters", command=on_reset, width=110).pack(side="right")

        for var in (self._min_var, self._max_var, self._search_var, self._location_var):
            var.trace_add("write", lambda *_: self._emit())

    @staticmethod
    def _rating_label(value: float) -> str:
        return "Any" if value <= 0 else f"{value:.1f}+"

    def _emit(self) -> None:
        if self._updating:
            return
        label = self._rating_var.get()
        rating = 0.0 if label == "Any" else float(label.rstrip("+"))
        self._on_change(
            rating=rating,
            price_min=_parse_amount(self._min_var.get(), self._defaults.price_min),
            price_max=_parse_amount(self._max_var.get(), self._defaults.price_max),
            search=self._search_var.get(),
            location=self._location_var.get(),
        )

    def show(self, filters: VendorFilters) -> None:
        self._updating = True
        try:
            self._rating_var.set(self._rating_label(filters.rating))
            self._min_var.set(f"{filters.price_min:.0f}")
            self._max_var.set(f"{filters.price_max:.0f}")
            self._search_var.set(filters.search)
            self._location_var.set(filters.location)
        finally:
            self._updating = False
