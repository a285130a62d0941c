import json
import sys
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def venue():
    from event_planner.core.models.category import ServiceCategory

    return ServiceCategory(id="venue-location", name="Venue & Location", slug="venue-location", sort_order=1)


@pytest.fixture
def catering():
    from event_planner.core.models.category import ServiceCategory

    return ServiceCategory(id="catering-food", name="Catering & Food", slug="catering-food", sort_order=2)


@pytest.fixture
def make_offer(venue):
    """Factory for vendor cards; defaults to the venue category."""
    from event_planner.core.models.offer import VendorOffer, VendorProfile

    def build(offer_id="v1", price=40000.0, category=None, **kwargs):
        vendor = kwargs.pop("vendor", None) or VendorProfile(id=f"ven-{offer_id}", business_name=f"Vendor {offer_id}")
        return VendorOffer(
            id=offer_id,
            vendor=vendor,
            category=category or venue,
            title=kwargs.pop("title", f"Offer {offer_id}"),
            base_price=price,
            **kwargs,
        )

    return build


@pytest.fixture
def store():
    from event_planner.core.services.package_store import PackageStore

    return PackageStore()


@pytest.fixture
def make_response():
    """Build a real `requests.Response` with a JSON (or raw) body."""
    import requests

    def build(status=200, body=None, raw=None):
        response = requests.Response()
        response.status_code = status
        if raw is not None:
            response._content = raw.encode("utf-8")
        else:
            response._content = json.dumps(body if body is not None else {}).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
        response.reason = "OK" if status < 400 else "Error"
        return response

    return build


class FakeSession:
    """Stands in for `requests.Session`; records calls and replays queued responses or errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def _next(self):
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self._next()

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next()


@pytest.fixture
def fake_session():
    return FakeSession
