from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from tkinter import messagebox
from typing import Callable, Dict

import customtkinter as ctk

from event_planner.core.errors import CollaboratorError, InvalidArgument
from event_planner.core.models.event import EventDetails
from event_planner.core.models.offer import VendorOffer
from event_planner.core.services.catalog import CategoryCatalog
from event_planner.core.services.event_details import criteria_from_details
from event_planner.core.services.recommendations import RecommendationCriteria
from event_planner.core.services.vendor_selection import (
    NO_VENDORS_MESSAGE,
    STATUS_ERROR,
    STATUS_LOADING,
    VendorSelectionController,
)
from event_planner.core.wizard.engine import WizardEngine
from event_planner.ui.components.offer_table import OfferTable
from event_planner.ui.components.package_panel import PackagePanel
from event_planner.ui.components.summary_panel import SummaryPanel
from event_planner.ui.components.wizard_window import WizardWindow
from event_planner.ui.layouts.event_bar import EventBar
from event_planner.ui.layouts.filter_bar import FilterBar
from event_planner.ui.styles import icons, theme

logger = logging.getLogger(__name__)

POLL_MS = 100


class MainWindow(ctk.CTk):
    """
    Package builder window.

    Recommendations are fetched on a worker thread; results come back through
    a queue polled on the Tk loop and are tagged with the controller's fetch
    token, so an older response never replaces a newer one.
    """

    def __init__(
        self,
        controller: VendorSelectionController,
        wizards: Dict[str, Callable[[], WizardEngine]] | None = None,
        categories: CategoryCatalog | None = None,
    ):
        super().__init__()
        self._palette = theme.apply_theme(self, "dusk")
        self.title("Event package builder")
        self.geometry("1280x760")
        self.minsize(1000, 600)

        self._controller = controller
        self._wizards = wizards or {}
        self._categories = categories
        self._results: "queue.Queue[tuple]" = queue.Queue()
        self._icons = icons.build_icons(self._palette["text"])
        self._accent_icons = icons.build_icons("#ffffff")
        pricing = controller.store.pricing

        self.columnconfigure(0, weight=3)
        self.columnconfigure(1, weight=2)
        self.rowconfigure(3, weight=1)

        self.event_bar = EventBar(self, self._search, icons=self._accent_icons)
        self.event_bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 4))

        self.filter_bar = FilterBar(self, controller.filters, controller.set_filters, self._reset_filters)
        self.filter_bar.grid(row=1, column=0, columnspan=2, sticky="ew", padx=8, pady=4)

        status_row = ctk.CTkFrame(self, fg_color="transparent")
        status_row.grid(row=2, column=0, sticky="ew", padx=8)
        self.tabs = ctk.CTkSegmentedButton(status_row, values=[""], command=self._on_tab)
        self.tabs.pack(side="left")
        self.retry_btn = ctk.CTkButton(
            status_row, text="Retry", width=80, command=self._retry, image=self._icons["retry"], compound="left"
        )
        self._status_var = tk.StringVar(value="Tell us about your event to see vendors.")
        ctk.CTkLabel(status_row, textvariable=self._status_var).pack(side="right", padx=(8, 0))

        left = ctk.CTkFrame(self)
        left.grid(row=3, column=0, sticky="nsew", padx=(8, 4), pady=4)
        self.offer_table = OfferTable(left, pricing, self._pick_offer, on_drop=self._drop_offer)
        self.offer_table.pack(fill="both", expand=True)
        ctk.CTkButton(
            left,
            text="Add to package",
            command=self._add_focused,
            image=self._accent_icons["add"],
            compound="left",
            **theme.accent_button_kwargs(self._palette),
        ).pack(anchor="e", padx=8, pady=(0, 8))

        right = ctk.CTkFrame(self, fg_color="transparent")
        right.grid(row=3, column=1, sticky="nsew", padx=(4, 8), pady=4)
        self.package_panel = PackagePanel(
            right, pricing, self._remove_item, self._set_quantity, icons=self._accent_icons
        )
        self.package_panel.pack(fill="both", expand=True)
        self.summary = SummaryPanel(right, pricing)
        self.summary.pack(fill="x", pady=(8, 0))

        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=4, column=0, columnspan=2, sticky="ew", padx=8, pady=(4, 8))
        ctk.CTkButton(actions, text="Clear package", command=self._clear_package).pack(side="left")
        for title, factory in self._wizards.items():
            ctk.CTkButton(actions, text=title, command=lambda f=factory, t=title: self._open_wizard(t, f)).pack(
                side="right", padx=(6, 0)
            )

        controller.subscribe(self._refresh)
        self.after(POLL_MS, self._poll_results)
        self._refresh()

    # -------- Fetching --------
    def _search(self, details: EventDetails) -> None:
        criteria = criteria_from_details(details, self.event_bar.popular_services())
        self._start_fetch(criteria)

    def _start_fetch(self, criteria: RecommendationCriteria) -> None:
        token = self._controller.begin_fetch(criteria)
        source = self._controller.source

        def work() -> None:
            try:
                self._results.put((token, source.get_recommendations(criteria), None))
            except CollaboratorError as exc:
                self._results.put((token, None, exc))
            except Exception as exc:
                logger.exception("Recommendation fetch crashed")
                self._results.put((token, None, CollaboratorError("recommendations", str(exc))))

        threading.Thread(target=work, daemon=True).start()

    def _poll_results(self) -> None:
        while True:
            try:
                token, buckets, error = self._results.get_nowait()
            except queue.Empty:
                break
            if error is not None:
                self._controller.fail_fetch(token, error)
            else:
                self._controller.complete_fetch(token, buckets)
        self.after(POLL_MS, self._poll_results)

    def _retry(self) -> None:
        if self._controller.criteria is None:
            return
        self._start_fetch(self._controller.criteria)

    # -------- Controller callbacks --------
    def _on_tab(self, label: str) -> None:
        visible = self._controller.filtered()
        slug = next((s for s, b in visible.items() if b.category.name == label), None)
        self._controller.select_category(slug)

    def _pick_offer(self, offer: VendorOffer) -> None:
        self._controller.select_offer(offer)

    def _drop_offer(self, offer_id: str, x_root: int, y_root: int) -> None:
        target = self.winfo_containing(x_root, y_root)
        while target is not None and target is not self.package_panel:
            target = target.master
        if target is None:
            return
        try:
            self._controller.drop_offer(offer_id)
        except InvalidArgument as exc:
            logger.error("Drop failed: %s", exc)
            messagebox.showerror("Add to package", str(exc), parent=self)

    def _add_focused(self) -> None:
        offer = self.offer_table.focused_offer()
        if offer is None:
            messagebox.showinfo("Add to package", "Select a vendor first.", parent=self)
            return
        self._controller.select_offer(offer)

    def _remove_item(self, item_id: str) -> None:
        self._controller.remove_offer(item_id)

    def _set_quantity(self, item_id: str, quantity: int) -> None:
        try:
            self._controller.store.update_item(item_id, quantity=quantity)
        except InvalidArgument as exc:
            messagebox.showerror("Quantity", str(exc), parent=self)
            return
        self._refresh()

    def _clear_package(self) -> None:
        self._controller.store.clear()
        self._refresh()

    def _reset_filters(self) -> None:
        self._controller.reset_filters()
        self.filter_bar.show(self._controller.filters)

    def _open_wizard(self, title: str, factory: Callable[[], WizardEngine]) -> None:
        WizardWindow(self, factory(), title=title, categories=self._categories)

    # -------- Rendering --------
    def _refresh(self) -> None:
        controller = self._controller
        visible = controller.filtered()

        labels = [bucket.category.name for bucket in visible.values()] or [""]
        self.tabs.configure(values=labels)
        bucket = controller.selected_bucket()
        self.tabs.set(bucket.category.name if bucket else "")

        selected_ids = {item.offer.id for item in controller.store.items()}
        self.offer_table.set_offers(bucket.vendors if bucket else [], selected_ids)
        package = controller.store.package
        self.package_panel.set_package(package)
        self.summary.update_values(package)

        self.retry_btn.pack_forget()
        if controller.status == STATUS_LOADING:
            self._status_var.set("Finding the best vendors for your event...")
        elif controller.status == STATUS_ERROR:
            self._status_var.set(f"{NO_VENDORS_MESSAGE}: {controller.error_message}")
            self.retry_btn.pack(side="right", padx=(8, 0))
        elif controller.no_vendors_found:
            self._status_var.set(f"{NO_VENDORS_MESSAGE}. Try widening the filters.")
            self.retry_btn.pack(side="right", padx=(8, 0))
        elif controller.criteria is not None:
            missing = controller.missing_categories()
            note = f" (nothing for {', '.join(missing)})" if missing else ""
            self._status_var.set(f"{controller.total_vendors()} vendors in {len(visible)} categories{note}")
