import pytest

from event_planner.core.errors import CollaboratorError, InvalidArgument
from event_planner.core.services.recommendations import CategoryBucket, RecommendationCriteria
from event_planner.core.services.vendor_selection import (
    STATUS_EMPTY,
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_READY,
    VendorSelectionController,
)

CRITERIA = RecommendationCriteria(
    event_type="Wedding", budget=100000, location="Mumbai", service_slugs=("venue-location", "catering-food")
)


class StubSource:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def get_recommendations(self, criteria):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def buckets(make_offer, venue, catering):
    return {
        "venue-location": CategoryBucket(venue, [make_offer("v1", 40000, average_rating=4.5)], 1, 1),
        "catering-food": CategoryBucket(catering, [make_offer("c1", 10000, category=catering, average_rating=3.0)], 1, 1),
    }


def test_load_populates_and_focuses_first_category(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))

    assert controller.load(CRITERIA) is True

    assert controller.status == STATUS_READY
    assert controller.selected_category == "venue-location"
    assert controller.total_vendors() == 2
    assert not controller.no_vendors_found


def test_stale_response_is_discarded(store, buckets, make_offer, venue):
    controller = VendorSelectionController(store, StubSource())
    old = controller.begin_fetch(CRITERIA)
    new = controller.begin_fetch(CRITERIA)
    newer_buckets = {"venue-location": CategoryBucket(venue, [make_offer("v9", 1000)], 1, 1)}

    assert controller.complete_fetch(new, newer_buckets) is True
    assert controller.complete_fetch(old, buckets) is False
    assert controller.fail_fetch(old, CollaboratorError("recommendations", "late")) is False

    assert list(controller.filtered()) == ["venue-location"]
    assert controller.find_offer("v9") is not None
    assert controller.status == STATUS_READY


def test_begin_fetch_marks_loading(store):
    controller = VendorSelectionController(store, StubSource())
    seen = []
    controller.subscribe(lambda: seen.append(controller.status))
    controller.begin_fetch(CRITERIA)
    assert seen == [STATUS_LOADING]


def test_source_error_sets_error_state_and_retry_recovers(store, buckets):
    source = StubSource(CollaboratorError("recommendations", "Service unavailable", "server", 503), buckets)
    controller = VendorSelectionController(store, source)

    assert controller.load(CRITERIA) is False
    assert controller.status == STATUS_ERROR
    assert controller.error_message == "Service unavailable"
    assert controller.no_vendors_found

    assert controller.retry() is True
    assert controller.status == STATUS_READY
    assert source.calls == 2


def test_unexpected_source_crash_becomes_error_state(store):
    controller = VendorSelectionController(store, StubSource(RuntimeError("boom")))
    assert controller.load(CRITERIA) is False
    assert controller.status == STATUS_ERROR
    assert "boom" in controller.error_message


def test_retry_without_previous_request_is_rejected(store):
    controller = VendorSelectionController(store, StubSource())
    with pytest.raises(InvalidArgument):
        controller.retry()


def test_empty_result_reports_no_vendors(store, venue):
    controller = VendorSelectionController(store, StubSource({"venue-location": CategoryBucket(venue, [], 0, 0)}))
    controller.load(CRITERIA)
    assert controller.status == STATUS_EMPTY
    assert controller.no_vendors_found
    assert controller.selected_category is None
    assert controller.missing_categories() == ["venue-location", "catering-food"]


def test_filters_hide_categories_and_move_focus(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))
    controller.load(CRITERIA)
    controller.select_category("catering-food")

    controller.set_filters(rating=4.0)

    assert list(controller.filtered()) == ["venue-location"]
    assert controller.selected_category == "venue-location"
    assert controller.missing_categories() == ["catering-food"]

    controller.set_filters(rating=5.0)
    assert controller.no_vendors_found
    assert controller.selected_bucket() is None

    controller.reset_filters()
    assert controller.total_vendors() == 2


def test_select_offer_uses_offer_category(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))
    controller.load(CRITERIA)
    offer = controller.find_offer("c1")

    package = controller.select_offer(offer)

    assert package.items[0].category.id == "catering-food"
    assert controller.is_selected(offer)
    with pytest.raises(InvalidArgument):
        controller.select_offer(None)


def test_drop_offer_searches_all_categories(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))
    controller.load(CRITERIA)
    controller.select_category("venue-location")

    package = controller.drop_offer("c1")

    assert package.items[0].offer.id == "c1"


def test_drop_of_unknown_offer_fails_loudly(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))
    controller.load(CRITERIA)

    with pytest.raises(InvalidArgument):
        controller.drop_offer("missing")
    assert store.items() == []


def test_remove_offer_updates_package(store, buckets):
    controller = VendorSelectionController(store, StubSource(buckets))
    controller.load(CRITERIA)
    package = controller.select_offer(controller.find_offer("v1"))

    package = controller.remove_offer(package.items[0].id)

    assert package.items == []
    assert not controller.is_selected(controller.find_offer("v1"))
