from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from event_planner.core.errors import CollaboratorError, InvalidArgument
from event_planner.core.models.offer import VendorOffer
from event_planner.core.models.package import EventPackage
from event_planner.core.services.package_store import PackageStore
from event_planner.core.services.recommendations import (
    CategoryBucket,
    RecommendationCriteria,
    RecommendationSource,
)
from event_planner.core.services.vendor_filters import VendorFilters, filter_vendors_by_category

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"

NO_VENDORS_MESSAGE = "No vendors found"


class VendorSelectionController:
    """
    Drives the "choose your vendors" step: fetches recommendations, filters
    them, tracks the focused category tab and forwards picks to the package store.

    Each fetch gets a generation number; results carrying an older number are
    dropped so a slow stale response never overwrites a newer one.
    """

    def __init__(
        self,
        store: PackageStore,
        source: RecommendationSource,
        filters: VendorFilters | None = None,
    ) -> None:
        self.store = store
        self.source = source
        self.default_filters = filters or VendorFilters()
        self.filters = self.default_filters
        self.criteria: RecommendationCriteria | None = None
        self.status = STATUS_IDLE
        self.error_message: str | None = None
        self.selected_category: str | None = None
        self._buckets: Dict[str, CategoryBucket] = {}
        self._generation = 0
        self._listeners: List[Callable[[], None]] = []

    # -------- Listeners --------
    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # -------- Fetching --------
    def begin_fetch(self, criteria: RecommendationCriteria) -> int:
        self._generation += 1
        self.criteria = criteria
        self.status = STATUS_LOADING
        self.error_message = None
        self._notify()
        return self._generation

    def complete_fetch(self, token: int, buckets: Dict[str, CategoryBucket]) -> bool:
        if token != self._generation:
            logger.info("Discarding stale recommendations (fetch %s, latest %s)", token, self._generation)
            return False
        self._buckets = dict(buckets)
        has_vendors = any(bucket.vendors for bucket in self._buckets.values())
        self.status = STATUS_READY if has_vendors else STATUS_EMPTY
        if self.selected_category not in self.filtered():
            keys = list(self.filtered())
            self.selected_category = keys[0] if keys else None
        self._notify()
        return True

    def fail_fetch(self, token: int, error: Exception) -> bool:
        if token != self._generation:
            logger.info("Ignoring failure of stale fetch %s: %s", token, error)
            return False
        self._buckets = {}
        self.selected_category = None
        self.status = STATUS_ERROR
        self.error_message = getattr(error, "message", "") or str(error)
        self._notify()
        return True

    def load(self, criteria: RecommendationCriteria) -> bool:
        """Synchronous fetch; returns False when the source failed."""
        token = self.begin_fetch(criteria)
        try:
            buckets = self.source.get_recommendations(criteria)
        except CollaboratorError as exc:
            self.fail_fetch(token, exc)
            return False
        except Exception as exc:
            logger.exception("Recommendation source crashed")
            self.fail_fetch(token, CollaboratorError("recommendations", str(exc)))
            return False
        self.complete_fetch(token, buckets)
        return True

    def retry(self) -> bool:
        if self.criteria is None:
            raise InvalidArgument("Nothing to retry: no recommendations were requested yet")
        return self.load(self.criteria)

    # -------- Filtering --------
    def filtered(self) -> Dict[str, CategoryBucket]:
        return filter_vendors_by_category(self._buckets, self.filters)

    def set_filters(self, **changes: Any) -> None:
        self.filters = replace(self.filters, **changes)
        visible = self.filtered()
        if self.selected_category not in visible:
            self.selected_category = next(iter(visible), None)
        self._notify()

    def reset_filters(self) -> None:
        self.filters = self.default_filters
        self.set_filters()

    def total_vendors(self) -> int:
        return sum(len(bucket.vendors) for bucket in self.filtered().values())

    @property
    def no_vendors_found(self) -> bool:
        if self.status in (STATUS_EMPTY, STATUS_ERROR):
            return True
        return self.status == STATUS_READY and not self.filtered()

    def missing_categories(self) -> List[str]:
        """Requested service slugs with nothing to show after filtering."""
        if self.criteria is None:
            return []
        visible = self.filtered()
        return [slug for slug in self.criteria.service_slugs if slug not in visible]

    # -------- Category focus --------
    def select_category(self, slug: str | None) -> None:
        self.selected_category = slug
        self._notify()

    def selected_bucket(self) -> Optional[CategoryBucket]:
        if self.selected_category is None:
            return None
        return self.filtered().get(self.selected_category)

    # -------- Package mutations --------
    def select_offer(self, offer: VendorOffer | None) -> EventPackage:
        if offer is None:
            raise InvalidArgument("select_offer requires an offer")
        package = self.store.add_item(offer, offer.category)
        self._notify()
        return package

    def remove_offer(self, item_id: str) -> EventPackage:
        package = self.store.remove_item(item_id)
        self._notify()
        return package

    def find_offer(self, offer_id: str) -> VendorOffer | None:
        for bucket in self._buckets.values():
            for offer in bucket.vendors:
                if offer.id == offer_id:
                    return offer
        return None

    def drop_offer(self, offer_id: str) -> EventPackage:
        """Drag-and-drop add: the payload only carries the offer id."""
        offer = self.find_offer(offer_id)
        if offer is None:
            raise InvalidArgument(f"Dropped offer {offer_id} not found in any category")
        return self.select_offer(offer)

    def is_selected(self, offer: VendorOffer) -> bool:
        return any(item.offer.id == offer.id for item in self.store.items())
