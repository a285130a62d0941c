from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Protocol

import requests

from event_planner.core.calculations.pricing_engine import format_price
from event_planner.core.models.category import ServiceCategory
from event_planner.core.models.event import BUDGET_ALLOCATION, DEFAULT_ALLOCATION
from event_planner.core.models.offer import VendorOffer
from event_planner.core.services.catalog import Catalog, category_from_payload, offer_from_payload
from event_planner.core.services.http import DEFAULT_TIMEOUT, build_session, request_json

logger = logging.getLogger(__name__)

MAX_OFFERS_PER_CATEGORY = 20
BUDGET_HEADROOM = 1.2


def _amount(value: float) -> str:
    if not value:
        return ""
    return f"{value:.0f}" if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class RecommendationCriteria:
    event_type: str = ""
    event_date: str = ""
    guest_count: int = 0
    budget: float = 0.0
    location: str = ""
    service_slugs: tuple[str, ...] = ()

    def to_params(self) -> dict[str, str]:
        return {
            "eventType": self.event_type,
            "eventDate": self.event_date,
            "guestCount": str(self.guest_count) if self.guest_count else "",
            "budget": _amount(self.budget),
            "location": self.location,
            "services": ",".join(self.service_slugs),
        }


@dataclass
class CategoryBucket:
    category: ServiceCategory
    vendors: List[VendorOffer] = field(default_factory=list)
    total: int = 0
    total_available: int = 0


class RecommendationSource(Protocol):
    def get_recommendations(self, criteria: RecommendationCriteria) -> Dict[str, CategoryBucket]: ...


def parse_vendors_by_category(payload: Mapping[str, Any]) -> Dict[str, CategoryBucket]:
    """Turn a `vendorsByCategory` response into buckets keyed by category slug."""
    raw_map = payload.get("vendorsByCategory", payload) if isinstance(payload, Mapping) else {}
    buckets: Dict[str, CategoryBucket] = {}
    for slug, entry in (raw_map or {}).items():
        if not isinstance(entry, Mapping):
            continue
        category_raw = entry.get("category") or {"id": slug, "slug": slug}
        category = category_from_payload(category_raw)
        known = {category.id: category}
        vendors = [o for o in (offer_from_payload(v, known) for v in entry.get("vendors") or []) if o is not None]
        total = int(entry.get("total", len(vendors)) or 0)
        buckets[str(slug)] = CategoryBucket(
            category=category,
            vendors=vendors,
            total=total,
            total_available=int(entry.get("totalAvailable", entry.get("total_available", total)) or 0),
        )
    return buckets


class HttpRecommendationSource:
    """Fetches ranked vendors from `GET /api/event-planning/recommendations`."""

    PATH = "/api/event-planning/recommendations"

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or build_session()
        self.timeout = timeout

    def get_recommendations(self, criteria: RecommendationCriteria) -> Dict[str, CategoryBucket]:
        params = criteria.to_params()
        logger.info("Fetching recommendations: %s", params)
        data = request_json(
            self.session,
            "GET",
            f"{self.base_url}{self.PATH}",
            "recommendations",
            timeout=self.timeout,
            params=params,
        )
        buckets = parse_vendors_by_category(data)
        logger.info(
            "Received %d categories, %d vendors",
            len(buckets),
            sum(len(b.vendors) for b in buckets.values()),
        )
        return buckets


class CatalogRecommendationSource:
    """
    Offline recommendation source over the local catalog.

    Per category: active offers within 120% of the budget, ordered featured
    first then by rating and review count, capped at 20, each annotated with
    a match percentage and the reasons behind it.
    """

    def __init__(self, catalog: Catalog, limit: int = MAX_OFFERS_PER_CATEGORY):
        self.catalog = catalog
        self.limit = limit

    def get_recommendations(self, criteria: RecommendationCriteria) -> Dict[str, CategoryBucket]:
        wanted = set(criteria.service_slugs)
        categories = [
            c
            for c in self.catalog.categories
            if c.is_active and c.parent_id is None and (not wanted or c.slug in wanted)
        ]
        buckets: Dict[str, CategoryBucket] = {}
        for category in sorted(categories, key=lambda c: c.sort_order):
            offers = [o for o in self.catalog.offers if o.category.id == category.id]
            if criteria.budget > 0:
                ceiling = criteria.budget * BUDGET_HEADROOM
                offers = [o for o in offers if o.base_price <= ceiling]
            offers.sort(key=lambda o: (not o.featured, -o.average_rating, -o.total_reviews))
            available = len(offers)
            ranked = [self._annotate(o, category, criteria) for o in offers[: self.limit]]
            buckets[category.slug] = CategoryBucket(
                category=category,
                vendors=ranked,
                total=len(ranked),
                total_available=available,
            )
        return buckets

    def _annotate(self, offer: VendorOffer, category: ServiceCategory, criteria: RecommendationCriteria) -> VendorOffer:
        score, reasons = score_offer(offer, category.slug, criteria)
        return replace(offer, match_percentage=min(100, score), match_reasons=reasons)


def score_offer(offer: VendorOffer, category_slug: str, criteria: RecommendationCriteria) -> tuple[int, list[str]]:
    """
    Points out of 95: rating 30, price fit 25, location 20, availability 10, reviews 10.

    Availability is not known here and always scores the flat 10.
    """
    score = 0.0
    reasons: list[str] = []

    if offer.average_rating:
        score += (offer.average_rating / 5.0) * 30
        if offer.average_rating >= 4.0:
            reasons.append(f"Rated {offer.average_rating:.1f}/5")

    allocated = criteria.budget * BUDGET_ALLOCATION.get(category_slug, DEFAULT_ALLOCATION)
    if allocated > 0:
        diff = abs(offer.base_price - allocated)
        price_score = max(0.0, 25 - (diff / allocated) * 25)
        score += price_score
        if price_score >= 12.5:
            reasons.append(f"Close to your {format_price(allocated)} allocation")

    location = criteria.location.strip()
    if location:
        if location in offer.service_area:
            score += 20
            reasons.append(f"Serves {location}")
        elif any(location.lower() in area.lower() for area in offer.service_area):
            score += 15
            reasons.append(f"Serves areas near {location}")

    score += 10

    score += min(10.0, offer.total_reviews / 10.0)
    if offer.total_reviews >= 50:
        reasons.append(f"{offer.total_reviews} reviews")
    if offer.featured:
        reasons.append("Featured vendor")

    return round(score), reasons
