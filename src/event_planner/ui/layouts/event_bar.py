import tkinter as tk
from tkinter import messagebox
from typing import Callable

import customtkinter as ctk

from event_planner.core.models.event import EVENT_TYPES, EventDetails
from event_planner.core.services.event_details import apply_event_type, find_event_type, validate_event_details
from event_planner.ui.styles import theme


class EventBar(ctk.CTkFrame):
    """
    Event details row: type, date, time, place, guests, budget.

    Picking an event type seeds guests, budget and duration from its typical
    values; "Find vendors" only fires when the details validate.
    """

    def __init__(self, master: tk.Misc, on_search: Callable[[EventDetails], None], icons: dict | None = None):
        super().__init__(master)
        self._on_search = on_search
        self._details = EventDetails()
        icons = icons or {}

        names = [et.name for et in EVENT_TYPES]
        self._type_var = tk.StringVar(value="")
        self._date_var = tk.StringVar()
        self._time_var = tk.StringVar()
        self._location_var = tk.StringVar()
        self._address_var = tk.StringVar()
        self._guests_var = tk.StringVar(value=str(self._details.guest_count))
        self._budget_var = tk.StringVar(value=f"{self._details.budget:.0f}")

        combo = ctk.CTkComboBox(
            self,
            values=names,
            variable=self._type_var,
            width=160,
            state="readonly",
            command=self._handle_type,
        )
        combo.grid(row=0, column=0, padx=(8, 6), pady=8)
        theme.style_combo_box(combo, theme.PALETTE)

        entries = [
            (self._date_var, "Date (YYYY-MM-DD)", 130),
            (self._time_var, "Time", 70),
            (self._location_var, "City", 110),
            (self._address_var, "Address", 180),
            (self._guests_var, "Guests", 70),
            (self._budget_var, "Budget", 100),
        ]
        for col, (var, hint, width) in enumerate(entries, start=1):
            ctk.CTkEntry(self, textvariable=var, placeholder_text=hint, width=width).grid(row=0, column=col, padx=(0, 6), pady=8)

        ctk.CTkButton(
            self,
            text="Find vendors",
            command=self._submit,
            image=icons.get("next"),
            compound="right",
            **theme.accent_button_kwargs(theme.PALETTE),
        ).grid(row=0, column=len(entries) + 1, padx=(6, 8), pady=8)

    def _handle_type(self, name: str) -> None:
        event_type = next((et for et in EVENT_TYPES if et.name == name), None)
        if event_type is None:
            return
        apply_event_type(self._details, event_type)
        self._guests_var.set(str(self._details.guest_count))
        self._budget_var.set(f"{self._details.budget:.0f}")

    def details(self) -> EventDetails:
        event_type = next((et for et in EVENT_TYPES if et.name == self._type_var.get()), None)
        if event_type is not None:
            self._details.event_type = event_type.id
        self._details.date = self._date_var.get().strip()
        self._details.time = self._time_var.get().strip()
        self._details.location = self._location_var.get().strip()
        self._details.address = self._address_var.get().strip()
        try:
            self._details.guest_count = int(self._guests_var.get().strip() or 0)
        except ValueError:
            self._details.guest_count = 0
        try:
            self._details.budget = float(self._budget_var.get().replace(",", "").strip() or 0)
        except ValueError:
            self._details.budget = 0.0
        return self._details

    def popular_services(self) -> list[str]:
        event_type = find_event_type(self._details.event_type)
        return list(event_type.popular_services) if event_type else []

    def _submit(self) -> None:
        details = self.details()
        errors = validate_event_details(details)
        if errors:
            messagebox.showerror("Event details", "\n".join(errors), parent=self)
            return
        self._on_search(details)
