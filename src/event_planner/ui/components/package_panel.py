import tkinter as tk
from tkinter import ttk
from typing import Callable

import customtkinter as ctk

from event_planner.core.calculations.pricing_engine import PricingEngine
from event_planner.core.models.package import EventPackage
from event_planner.ui.styles import theme


class PackagePanel(ctk.CTkFrame):
    """Selected items, one per category, with remove and quantity controls."""

    def __init__(
        self,
        master: tk.Misc,
        pricing: PricingEngine,
        on_remove: Callable[[str], None],
        on_quantity: Callable[[str, int], None],
        icons: dict | None = None,
    ):
        super().__init__(master)
        self._pricing = pricing
        self._on_remove = on_remove
        self._on_quantity = on_quantity

        ctk.CTkLabel(self, text="Your package", font=("Segoe UI", 12, "bold")).pack(anchor="w", padx=8, pady=(8, 4))
        columns = ("category", "offer", "qty", "total")
        tree = ttk.Treeview(self, columns=columns, show="headings", selectmode="browse", height=8)
        tree.heading("category", text="Category")
        tree.heading("offer", text="Vendor")
        tree.heading("qty", text="Qty")
        tree.heading("total", text="Total")
        tree.column("category", width=150)
        tree.column("offer", width=200)
        tree.column("qty", width=50, anchor="center")
        tree.column("total", width=100, anchor="e")
        tree.pack(fill="both", expand=True, padx=8)
        self._tree = tree

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(fill="x", padx=8, pady=6)
        icons = icons or {}
        ctk.CTkButton(buttons, text="-", width=32, command=lambda: self._step_quantity(-1)).pack(side="left")
        ctk.CTkButton(buttons, text="+", width=32, command=lambda: self._step_quantity(1)).pack(side="left", padx=(4, 0))
        ctk.CTkButton(
            buttons,
            text="Remove",
            command=self._remove_focused,
            image=icons.get("remove"),
            compound="left",
            **theme.accent_button_kwargs(theme.PALETTE),
        ).pack(side="right")

    def set_package(self, package: EventPackage) -> None:
        for row in self._tree.get_children():
            self._tree.delete(row)
        for item in package.items:
            self._tree.insert(
                "",
                tk.END,
                iid=item.id,
                values=(
                    item.category.name,
                    item.offer.vendor.business_name or item.offer.title,
                    item.quantity,
                    self._pricing.format_currency(item.total_price),
                ),
            )

    def _focused_item(self) -> str | None:
        selection = self._tree.selection()
        return selection[0] if selection else None

    def _remove_focused(self) -> None:
        item_id = self._focused_item()
        if item_id:
            self._on_remove(item_id)

    def _step_quantity(self, delta: int) -> None:
        item_id = self._focused_item()
        if not item_id:
            return
        current = int(self._tree.set(item_id, "qty") or 1)
        quantity = current + delta
        if quantity < 1:
            return
        self._on_quantity(item_id, quantity)
        if self._tree.exists(item_id):
            self._tree.selection_set(item_id)
