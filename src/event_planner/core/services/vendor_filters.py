from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping

from event_planner.core.models.offer import VendorOffer
from event_planner.core.services.recommendations import CategoryBucket


@dataclass(frozen=True)
class VendorFilters:
    rating: float = 0.0
    price_min: float = 0.0
    price_max: float = 100000.0
    search: str = ""
    location: str = ""

    @classmethod
    def from_settings(cls, settings: dict) -> "VendorFilters":
        raw = settings.get("filters", {})
        return cls(
            rating=float(raw.get("rating", 0.0)),
            price_min=float(raw.get("price_min", 0.0)),
            price_max=float(raw.get("price_max", 100000.0)),
        )


def offer_matches(offer: VendorOffer, filters: VendorFilters) -> bool:
    if (offer.average_rating or 0.0) < filters.rating:
        return False
    price = offer.base_price or 0.0
    if price < filters.price_min or price > filters.price_max:
        return False
    term = filters.search.strip().lower()
    if term and term not in offer.title.lower() and term not in offer.vendor.business_name.lower():
        return False
    place = filters.location.strip().lower()
    if place and not any(place in area.lower() for area in offer.service_area):
        return False
    return True


def filter_vendors_by_category(
    buckets: Mapping[str, CategoryBucket], filters: VendorFilters
) -> Dict[str, CategoryBucket]:
    """
    Apply the filters to every category.

    Categories left without offers are dropped, not kept empty: the UI shows
    one tab per key.
    """
    filtered: Dict[str, CategoryBucket] = {}
    for slug, bucket in buckets.items():
        vendors = [offer for offer in bucket.vendors if offer_matches(offer, filters)]
        if vendors:
            filtered[slug] = replace(bucket, vendors=vendors, total=len(vendors))
    return filtered
