import tkinter as tk
import customtkinter as ctk

from event_planner.core.calculations.pricing_engine import PricingEngine
from event_planner.core.models.package import EventPackage
from event_planner.ui.styles import theme


class SummaryPanel(ctk.CTkFrame):
    """Package totals: subtotal, platform fee, tax, total and estimated savings."""

    def __init__(self, master: tk.Misc, pricing: PricingEngine):
        super().__init__(master, fg_color="transparent")
        self._pricing = pricing
        zero = self._pricing.format_currency(0)
        self._count_var = tk.StringVar(value="0 services")
        self._subtotal_var = tk.StringVar(value=zero)
        self._fee_var = tk.StringVar(value=zero)
        self._tax_var = tk.StringVar(value=zero)
        self._total_var = tk.StringVar(value=zero)
        self._savings_var = tk.StringVar(value="")

        ctk.CTkLabel(self, text="Package summary", font=("Segoe UI", 12, "bold")).grid(row=0, column=0, sticky="w", padx=8)
        ctk.CTkLabel(self, textvariable=self._count_var).grid(row=0, column=1, sticky="e", padx=8)

        rows = [
            ("Subtotal", self._subtotal_var),
            (f"Platform fee ({pricing.fee_rate * 100:.0f}%)", self._fee_var),
            (f"Taxes & GST ({pricing.tax_rate * 100:.0f}%)", self._tax_var),
        ]
        for idx, (label, var) in enumerate(rows, start=1):
            ctk.CTkLabel(self, text=label).grid(row=idx, column=0, sticky="w", padx=8)
            ctk.CTkLabel(self, textvariable=var).grid(row=idx, column=1, sticky="e", padx=8)

        separator = ctk.CTkFrame(self, height=2, fg_color=theme.PALETTE["border"])
        separator.grid(row=4, column=0, columnspan=2, sticky="we", pady=6, padx=8)

        ctk.CTkLabel(self, text="Total", font=("Segoe UI", 13, "bold")).grid(row=5, column=0, sticky="w", padx=8)
        ctk.CTkLabel(self, textvariable=self._total_var, font=("Segoe UI", 13, "bold")).grid(row=5, column=1, sticky="e", padx=8)
        self._savings_label = ctk.CTkLabel(self, textvariable=self._savings_var, text_color=theme.PALETTE["accent"])
        self._savings_label.grid(row=6, column=0, columnspan=2, sticky="w", padx=8, pady=(4, 0))

        for col in range(2):
            self.columnconfigure(col, weight=1)

    def update_values(self, package: EventPackage) -> None:
        fmt = self._pricing.format_currency
        count = len(package.items)
        self._count_var.set(f"{count} service{'s' if count != 1 else ''}")
        self._subtotal_var.set(fmt(package.subtotal))
        self._fee_var.set(fmt(package.platform_fee))
        self._tax_var.set(fmt(package.tax_amount))
        self._total_var.set(fmt(package.total_amount))
        if package.estimated_savings > 0:
            self._savings_var.set(f"You save about {fmt(package.estimated_savings)} by booking as a package")
        else:
            self._savings_var.set("")
