from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable

from event_planner.core.errors import InvalidArgument
from event_planner.core.models.package import PackageItem

DEFAULT_FEE_RATE = 0.10
DEFAULT_TAX_RATE = 0.18
DEFAULT_SAVINGS_RATE = 0.15


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: float
    platform_fee: float
    tax_amount: float
    estimated_savings: float = 0.0

    @property
    def total(self) -> float:
        return self.subtotal + self.platform_fee + self.tax_amount


def _truncate(amount: float, rate: float) -> float:
    # Decimal avoids 50000 * 0.18 landing on 8999.999...
    value = Decimal(str(amount)) * Decimal(str(rate))
    return float(value.to_integral_value(rounding=ROUND_FLOOR))


def line_total(item: PackageItem) -> float:
    qty = item.quantity
    if isinstance(qty, bool) or not isinstance(qty, int):
        raise InvalidArgument(f"Quantity must be a whole number, got {qty!r}")
    if qty <= 0:
        raise InvalidArgument(f"Quantity must be > 0, got {qty}")
    return float(item.unit_price) * qty


class PricingEngine:
    """
    Package totals calculator.

    Fee and tax are both taken from the subtotal alone (tax is not charged on
    the platform fee) and both are truncated to whole currency units.
    """

    def __init__(
        self,
        fee_rate: float = DEFAULT_FEE_RATE,
        tax_rate: float = DEFAULT_TAX_RATE,
        savings_rate: float = DEFAULT_SAVINGS_RATE,
        currency: str = "INR",
    ):
        self.fee_rate = fee_rate
        self.tax_rate = tax_rate
        self.savings_rate = savings_rate
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: dict) -> "PricingEngine":
        pricing = settings.get("pricing", {})
        return cls(
            fee_rate=float(pricing.get("fee_rate", DEFAULT_FEE_RATE)),
            tax_rate=float(pricing.get("tax_rate", DEFAULT_TAX_RATE)),
            savings_rate=float(pricing.get("savings_rate", DEFAULT_SAVINGS_RATE)),
            currency=str(pricing.get("currency", "INR")),
        )

    def subtotal(self, items: Iterable[PackageItem]) -> float:
        return sum((line_total(item) for item in items), 0.0)

    def platform_fee(self, subtotal: float) -> float:
        return _truncate(subtotal, self.fee_rate)

    def tax_amount(self, subtotal: float) -> float:
        return _truncate(subtotal, self.tax_rate)

    def summarize(self, items: Iterable[PackageItem]) -> PricingBreakdown:
        subtotal = self.subtotal(items)
        return PricingBreakdown(
            subtotal=subtotal,
            platform_fee=self.platform_fee(subtotal),
            tax_amount=self.tax_amount(subtotal),
            estimated_savings=_truncate(subtotal, self.savings_rate),
        )

    def format_currency(self, value: float) -> str:
        return format_price(value, self.currency)


def format_price(value: float, currency: str = "INR") -> str:
    """Whole-unit price with thousands separators, e.g. `₹64,000`."""
    symbol = "₹" if currency == "INR" else f"{currency} "
    return f"{symbol}{value:,.0f}"
