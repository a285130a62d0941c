from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Iterable, List, Set

from event_planner.core.calculations.pricing_engine import PricingEngine
from event_planner.core.models.offer import VendorOffer


class OfferTable(ttk.Frame):
    """
    Vendor cards of one category as table rows.

    Double-click (or the add button in the owning layout) picks the focused
    row; dragging a row reports the offer id and the drop point to `on_drop`.
    Rows already in the package are marked.
    """

    def __init__(
        self,
        master: tk.Misc,
        pricing: PricingEngine,
        on_pick: Callable[[VendorOffer], None],
        on_drop: Callable[[str, int, int], None] | None = None,
    ):
        super().__init__(master, padding=8)
        self._pricing = pricing
        self._on_pick = on_pick
        self._on_drop = on_drop
        self._drag_id: str | None = None
        self._dragging = False
        self._offers: List[VendorOffer] = []

        columns = ("check", "title", "vendor", "rating", "price", "match")
        container = ttk.Frame(self)
        container.pack(fill="both", expand=True)
        tree = ttk.Treeview(container, columns=columns, show="headings", selectmode="browse", height=14)
        tree.heading("check", text="")
        tree.heading("title", text="Service")
        tree.heading("vendor", text="Vendor")
        tree.heading("rating", text="Rating")
        tree.heading("price", text="Price")
        tree.heading("match", text="Match")
        tree.column("check", width=36, anchor="center")
        tree.column("title", width=260)
        tree.column("vendor", width=160)
        tree.column("rating", width=90, anchor="center")
        tree.column("price", width=100, anchor="e")
        tree.column("match", width=70, anchor="center")
        tree.tag_configure("selected", background="#3a2a18")
        tree.tag_configure("featured", font=("Segoe UI", 10, "bold"))
        tree.pack(side="left", fill="both", expand=True)
        scrollbar = ttk.Scrollbar(container, orient="vertical", command=tree.yview)
        scrollbar.pack(side="right", fill="y")
        tree.configure(yscrollcommand=scrollbar.set)
        tree.bind("<Double-1>", self._on_double_click)
        tree.bind("<ButtonPress-1>", self._start_drag, add="+")
        tree.bind("<B1-Motion>", self._drag_motion, add="+")
        tree.bind("<ButtonRelease-1>", self._end_drag, add="+")
        self._tree = tree

        self._reasons_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self._reasons_var, wraplength=640).pack(anchor="w", pady=(6, 0))
        tree.bind("<<TreeviewSelect>>", lambda _e: self._show_reasons())

    def set_offers(self, offers: Iterable[VendorOffer], selected_ids: Set[str]) -> None:
        self._offers = list(offers)
        for row in self._tree.get_children():
            self._tree.delete(row)
        for offer in self._offers:
            chosen = offer.id in selected_ids
            tags = []
            if chosen:
                tags.append("selected")
            if offer.featured:
                tags.append("featured")
            self._tree.insert(
                "",
                tk.END,
                iid=offer.id,
                values=(
                    "[x]" if chosen else "[ ]",
                    offer.title,
                    offer.vendor.business_name or "-",
                    f"{offer.average_rating:.1f} ({offer.total_reviews})",
                    self._pricing.format_currency(offer.base_price),
                    f"{offer.match_percentage}%" if offer.match_percentage is not None else "",
                ),
                tags=tuple(tags),
            )
        self._reasons_var.set("")

    def focused_offer(self) -> VendorOffer | None:
        selection = self._tree.selection()
        if not selection:
            return None
        return next((o for o in self._offers if o.id == selection[0]), None)

    def _on_double_click(self, event: tk.Event) -> None:
        row = self._tree.identify_row(event.y)
        offer = next((o for o in self._offers if o.id == row), None)
        if offer is not None:
            self._on_pick(offer)

    def _show_reasons(self) -> None:
        offer = self.focused_offer()
        if offer is None or not offer.match_reasons:
            self._reasons_var.set("")
            return
        self._reasons_var.set("Why: " + "; ".join(offer.match_reasons))

    # -------- Drag and drop --------
    def _start_drag(self, event: tk.Event) -> None:
        self._drag_id = self._tree.identify_row(event.y) or None
        self._dragging = False

    def _drag_motion(self, _event: tk.Event) -> None:
        if self._drag_id and not self._dragging:
            self._dragging = True
            self._tree.configure(cursor="hand2")

    def _end_drag(self, event: tk.Event) -> None:
        offer_id, dragging = self._drag_id, self._dragging
        self._drag_id, self._dragging = None, False
        self._tree.configure(cursor="")
        if dragging and offer_id and self._on_drop is not None:
            self._on_drop(offer_id, event.x_root, event.y_root)
