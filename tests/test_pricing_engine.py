import pytest

from event_planner.core.calculations.pricing_engine import PricingEngine, format_price, line_total
from event_planner.core.errors import InvalidArgument
from event_planner.core.models.package import PackageItem


def _item(offer, quantity=1):
    return PackageItem(id=f"item-{offer.id}", category=offer.category, offer=offer, unit_price=offer.base_price, quantity=quantity)


def test_summarize_applies_fee_and_tax_on_subtotal(make_offer, catering):
    engine = PricingEngine()
    items = [_item(make_offer("v1", 40000)), _item(make_offer("c1", 10000, category=catering))]

    breakdown = engine.summarize(items)

    assert breakdown.subtotal == 50000
    assert breakdown.platform_fee == 5000
    assert breakdown.tax_amount == 9000
    assert breakdown.total == 64000
    assert breakdown.estimated_savings == 7500


def test_fee_and_tax_are_truncated_to_whole_units(make_offer):
    engine = PricingEngine()
    breakdown = engine.summarize([_item(make_offer("v1", 999))])

    assert breakdown.platform_fee == 99
    assert breakdown.tax_amount == 179
    assert breakdown.total == 999 + 99 + 179


def test_empty_package_totals_are_zero():
    breakdown = PricingEngine().summarize([])
    assert (breakdown.subtotal, breakdown.platform_fee, breakdown.tax_amount, breakdown.total) == (0, 0, 0, 0)


def test_summarize_is_idempotent(make_offer):
    engine = PricingEngine()
    items = [_item(make_offer("v1", 12345), quantity=3)]
    assert engine.summarize(items) == engine.summarize(items)


def test_quantity_multiplies_line_total(make_offer):
    assert line_total(_item(make_offer("v1", 2500), quantity=4)) == 10000


@pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
def test_line_total_rejects_bad_quantity(make_offer, quantity):
    with pytest.raises(InvalidArgument):
        line_total(_item(make_offer("v1", 100), quantity=quantity))


def test_rates_come_from_settings():
    engine = PricingEngine.from_settings({"pricing": {"fee_rate": 0.05, "tax_rate": 0.12}})
    assert engine.platform_fee(1000) == 50
    assert engine.tax_amount(1000) == 120
    assert engine.currency == "INR"


def test_format_price_uses_rupee_and_separators():
    assert format_price(64000) == "₹64,000"
    assert PricingEngine().format_currency(1234567.8) == "₹1,234,568"
    assert format_price(10, "EUR") == "EUR 10"
