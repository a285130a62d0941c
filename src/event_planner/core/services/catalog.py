from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

import requests

from event_planner.core.errors import CollaboratorError
from event_planner.core.models.category import ServiceCategory
from event_planner.core.models.event import CATEGORY_NAMES
from event_planner.core.models.offer import VendorOffer, VendorProfile
from event_planner.core.services.http import DEFAULT_TIMEOUT, build_session, request_json

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "unknown"
CATALOG_PATH = Path(__file__).resolve().parents[2] / "data" / "catalog.json"


@dataclass
class Catalog:
    categories: list[ServiceCategory]
    offers: list[VendorOffer]


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int | None = 0) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def category_from_payload(raw: Mapping[str, Any]) -> ServiceCategory:
    slug = str(raw.get("slug") or raw.get("id") or UNKNOWN_CATEGORY)
    return ServiceCategory(
        id=str(raw.get("id") or slug),
        name=str(raw.get("name") or CATEGORY_NAMES.get(slug, slug)),
        slug=slug,
        icon=str(raw.get("icon") or ""),
        sort_order=_to_int(raw.get("sort_order"), 0) or 0,
        is_active=bool(raw.get("is_active", True)),
        parent_id=raw.get("parent_id") or None,
        description=str(raw.get("description") or ""),
    )


def resolve_category_id(raw: Mapping[str, Any]) -> str:
    """Nested category id, then the offer's own `category_id`, then `"unknown"`."""
    nested = raw.get("category")
    if isinstance(nested, Mapping) and nested.get("id"):
        return str(nested["id"])
    if raw.get("category_id"):
        return str(raw["category_id"])
    return UNKNOWN_CATEGORY


def offer_from_payload(
    raw: Mapping[str, Any],
    known_categories: Optional[Mapping[str, ServiceCategory]] = None,
) -> VendorOffer | None:
    """
    Normalize one upstream vendor-card payload into a `VendorOffer`.

    Upstream shapes disagree on where the category lives; the category id is
    resolved here once so nothing downstream repeats the fallback. Payloads
    without an id are skipped (None).
    """
    if not isinstance(raw, Mapping) or not raw.get("id"):
        logger.warning("Skipping malformed offer payload: %r", raw)
        return None

    category_id = resolve_category_id(raw)
    nested = raw.get("category")
    if isinstance(nested, Mapping) and nested.get("id"):
        category = category_from_payload(nested)
    elif known_categories and category_id in known_categories:
        category = known_categories[category_id]
    else:
        category = ServiceCategory(
            id=category_id,
            name=CATEGORY_NAMES.get(category_id, category_id),
            slug=category_id,
        )

    vendor_raw = raw.get("vendor") if isinstance(raw.get("vendor"), Mapping) else {}
    vendor = VendorProfile(
        id=str(vendor_raw.get("id") or raw.get("vendor_id") or ""),
        business_name=str(vendor_raw.get("business_name") or ""),
        city=str(vendor_raw.get("city") or ""),
        verification_status=str(vendor_raw.get("verification_status") or "pending"),
    )

    areas = raw.get("service_area") or []
    if isinstance(areas, str):
        areas = [areas]
    match = raw.get("matchPercentage", raw.get("match_percentage"))
    return VendorOffer(
        id=str(raw["id"]),
        vendor=vendor,
        category=category,
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        base_price=_to_float(raw.get("base_price")),
        average_rating=_to_float(raw.get("average_rating")),
        total_reviews=_to_int(raw.get("total_reviews"), 0) or 0,
        max_capacity=_to_int(raw.get("max_capacity"), None),
        service_area=[str(a) for a in areas],
        featured=bool(raw.get("featured", False)),
        match_percentage=_to_int(match, None) if match is not None else None,
        match_reasons=[str(r) for r in raw.get("reasons") or raw.get("match_reasons") or []],
    )


def load_catalog(path: str | Path | None = None) -> Catalog:
    """
    Load categories and vendor cards from a JSON file (`data/catalog.json` by default).

    A missing or broken file yields an empty catalog.
    """
    target = Path(path) if path else CATALOG_PATH
    if target.is_dir():
        target = target / "catalog.json"
    if not target.exists():
        logger.warning("Catalog %s not found, using empty catalog", target)
        return Catalog(categories=[], offers=[])
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load catalog %s: %s", target, exc)
        return Catalog(categories=[], offers=[])

    categories = [category_from_payload(item) for item in data.get("categories", [])]
    by_id = {c.id: c for c in categories}
    offers: list[VendorOffer] = []
    for item in data.get("vendors", []):
        offer = offer_from_payload(item, by_id)
        if offer is not None:
            offers.append(offer)
    return Catalog(categories=categories, offers=offers)


class CategoryCatalog(Protocol):
    def list_categories(self) -> list[ServiceCategory]: ...

    def children_of(self, parent_id: str | None) -> list[ServiceCategory]: ...


class JsonCategoryCatalog:
    """Category catalog backed by the local JSON catalog."""

    def __init__(self, catalog: Catalog):
        self._catalog = catalog

    def list_categories(self) -> list[ServiceCategory]:
        return sorted(
            (c for c in self._catalog.categories if c.is_active),
            key=lambda c: (c.sort_order, c.name.lower()),
        )

    def children_of(self, parent_id: str | None) -> list[ServiceCategory]:
        return [c for c in self.list_categories() if c.parent_id == parent_id]


class HttpCategoryCatalog:
    """Category catalog backed by `GET /api/categories`."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or build_session()
        self.timeout = timeout

    def list_categories(self) -> list[ServiceCategory]:
        data = request_json(self.session, "GET", f"{self.base_url}/api/categories", "categories", timeout=self.timeout)
        if isinstance(data, Mapping):
            data = data.get("categories", [])
        categories = [category_from_payload(item) for item in data if isinstance(item, Mapping)]
        return sorted(categories, key=lambda c: (c.sort_order, c.name.lower()))

    def children_of(self, parent_id: str | None) -> list[ServiceCategory]:
        return [c for c in self.list_categories() if c.parent_id == parent_id]


def category_choices(catalog: CategoryCatalog, parent_id: str | None = None) -> list[ServiceCategory]:
    """
    Options for a category picker: top-level categories, or the children of
    `parent_id`. An unreachable catalog yields no options so the caller can
    fall back to free text.
    """
    try:
        if parent_id is None:
            return [c for c in catalog.list_categories() if c.parent_id is None]
        return catalog.children_of(parent_id)
    except CollaboratorError as exc:
        logger.warning("Category catalog unavailable: %s", exc)
        return []
