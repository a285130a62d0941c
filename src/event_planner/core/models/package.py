from dataclasses import dataclass, field
from typing import Any, List

from event_planner.core.models.category import ServiceCategory
from event_planner.core.models.offer import VendorOffer


@dataclass(frozen=True)
class PackageItem:
    """A chosen offer bound to its category. Quantity changes produce a new item with the same id."""

    id: str
    category: ServiceCategory
    offer: VendorOffer
    unit_price: float
    quantity: int = 1
    customizations: dict[str, Any] = field(default_factory=dict)

    @property
    def total_price(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class EventPackage:
    """Snapshot of the selected items with totals derived from them."""

    items: List[PackageItem] = field(default_factory=list)
    subtotal: float = 0.0
    platform_fee: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    estimated_savings: float = 0.0

    def item_for_category(self, category_id: str) -> PackageItem | None:
        return next((item for item in self.items if item.category.id == category_id), None)
