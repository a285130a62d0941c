from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any, List, Mapping

from event_planner.core.calculations.pricing_engine import PricingEngine
from event_planner.core.errors import InvalidArgument
from event_planner.core.models.category import ServiceCategory
from event_planner.core.models.offer import VendorOffer
from event_planner.core.models.package import EventPackage, PackageItem

logger = logging.getLogger(__name__)


def _new_item_id() -> str:
    return f"item_{uuid.uuid4().hex[:12]}"


class PackageStore:
    """
    Holds the customer's package for one planning flow.

    At most one item per category id; picking another offer for a category
    drops the old item and appends the new one, so the category moves to the
    end of the order. Totals are rebuilt from the item list on every change.
    """

    def __init__(self, pricing: PricingEngine | None = None) -> None:
        self._pricing = pricing or PricingEngine()
        self._items: List[PackageItem] = []
        self._package = EventPackage()

    @property
    def pricing(self) -> PricingEngine:
        return self._pricing

    @property
    def package(self) -> EventPackage:
        return self._package

    def items(self) -> List[PackageItem]:
        return list(self._items)

    def add_item(self, offer: VendorOffer | None, category: ServiceCategory | None) -> EventPackage:
        if offer is None:
            raise InvalidArgument("add_item requires an offer")
        if category is None:
            raise InvalidArgument("add_item requires a category")

        item = PackageItem(
            id=_new_item_id(),
            category=category,
            offer=offer,
            unit_price=float(offer.base_price or 0.0),
            quantity=1,
        )
        replaced = [i for i in self._items if i.category.id == category.id]
        self._items = [i for i in self._items if i.category.id != category.id]
        self._items.append(item)
        if replaced:
            logger.info("package: replaced %s in category %s with %s", replaced[0].offer.id, category.id, offer.id)
        else:
            logger.info("package: added %s in category %s", offer.id, category.id)
        return self._recalculate()

    def remove_item(self, item_id: str) -> EventPackage:
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        if len(self._items) != before:
            logger.info("package: removed item %s", item_id)
        return self._recalculate()

    def update_item(
        self,
        item_id: str,
        quantity: int | None = None,
        customizations: Mapping[str, Any] | None = None,
    ) -> EventPackage:
        index = next((n for n, i in enumerate(self._items) if i.id == item_id), None)
        if index is None:
            raise InvalidArgument(f"Package item {item_id} not found")
        item = self._items[index]
        changes: dict[str, Any] = {}
        if quantity is not None:
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise InvalidArgument(f"Quantity must be a whole number > 0, got {quantity!r}")
            changes["quantity"] = quantity
        if customizations is not None:
            changes["customizations"] = {**item.customizations, **customizations}
        self._items[index] = replace(item, **changes)
        return self._recalculate()

    def clear(self) -> EventPackage:
        self._items = []
        logger.info("package: cleared")
        return self._recalculate()

    def _recalculate(self) -> EventPackage:
        breakdown = self._pricing.summarize(self._items)
        self._package = EventPackage(
            items=list(self._items),
            subtotal=breakdown.subtotal,
            platform_fee=breakdown.platform_fee,
            tax_amount=breakdown.tax_amount,
            total_amount=breakdown.total,
            estimated_savings=breakdown.estimated_savings,
        )
        return self._package
