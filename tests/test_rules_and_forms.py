import pytest

from event_planner.core.models.wizard import Attachment, WizardRecord
from event_planner.core.wizard.forms import service_card_wizard, vendor_services_wizard
from event_planner.core.wizard.rules import (
    field_value,
    in_range,
    min_length,
    ordered,
    required,
    step_validator,
    when,
)


def test_field_value_reads_nested_paths():
    record = WizardRecord({"pricing": {"wedding": {"min": 5}}})
    assert field_value(record, "pricing.wedding.min") == 5
    assert field_value(record, "pricing.party.min") is None
    assert field_value(record, "missing") is None


def test_first_failing_rule_per_field_wins():
    validate = step_validator(
        required("title", "Title is required"),
        min_length("title", 5, "Too short"),
    )
    assert validate(WizardRecord({"title": " "})) == {"title": "Title is required"}
    assert validate(WizardRecord({"title": "abc"})) == {"title": "Too short"}
    assert validate(WizardRecord({"title": "abcde"})) == {}


def test_ordered_skips_non_numbers():
    rule = ordered("low", "high", "low above high")
    assert rule(WizardRecord({"low": "", "high": 3})) is None
    assert rule(WizardRecord({"low": 4, "high": 3})) == ("high", "low above high")
    assert rule(WizardRecord({"low": "3", "high": "3"})) is None


def test_in_range_and_when():
    rule = when(lambda r: r.get("deposit_required"), in_range("deposit", 0, 100, "0-100"))
    assert rule(WizardRecord({"deposit_required": False, "deposit": 150})) is None
    assert rule(WizardRecord({"deposit_required": True, "deposit": 150})) == ("deposit", "0-100")
    assert rule(WizardRecord({"deposit_required": True, "deposit": 100})) is None


def test_service_card_wizard_blocks_until_each_step_is_valid():
    engine = service_card_wizard()
    assert engine.total_steps == 6
    assert [s.title for s in engine.steps][:4] == ["Basic Info", "Pricing", "Service Details", "Media & Images"]

    assert engine.next() is False
    assert set(engine.errors) == {"title", "description", "category"}

    engine.update_field("title", "Mehndi")
    engine.update_field("description", "Bridal mehndi with organic henna")
    engine.update_field("category", "beauty-wellness")
    assert engine.next() is True

    assert engine.next() is False
    assert "base_price" in engine.errors
    engine.update_field("base_price", 8000)
    assert engine.next() is True

    engine.update_field("min_booking_time", 40)
    assert engine.next() is False
    assert set(engine.errors) == {"service_area", "max_capacity", "max_booking_time"}
    engine.update_field("service_area", ["Mumbai"])
    engine.update_field("max_capacity", 20)
    engine.update_field("min_booking_time", 2)
    assert engine.next() is True

    assert engine.next() is False
    assert engine.errors == {"images": "At least one service image is required"}
    engine.add_attachment("images", Attachment("hands.jpg", "image/jpeg", data=b"x"))
    assert engine.next() is True
    assert engine.next() is True
    assert engine.is_last


def test_service_card_event_pricing_ranges_are_checked():
    engine = service_card_wizard()
    engine.go_to(2)
    engine.update_field("base_price", 1000)
    pricing = engine.record.get("event_type_pricing")
    pricing["wedding"] = {"min": 9000, "max": 5000}
    engine.update_field("event_type_pricing", pricing)

    assert engine.next() is False
    assert "event_type_pricing" in engine.errors


def test_service_card_records_are_independent():
    first = service_card_wizard()
    first.update_field("tags", ["mehndi"])
    first.record.get("event_type_pricing")["wedding"]["min"] = 1
    second = service_card_wizard()
    assert second.record.get("tags") == []
    assert second.record.get("event_type_pricing")["wedding"]["min"] == 0


@pytest.mark.parametrize("percentage, ok", [(0, True), (100, True), (101, False), (-5, False)])
def test_vendor_services_advance_payment_range(percentage, ok):
    engine = vendor_services_wizard()
    engine.go_to(3)
    engine.update_field("basic_package_price", 15000)
    engine.update_field("advance_payment_percentage", percentage)
    assert (engine.validate_step() == {}) is ok


def test_vendor_services_steps():
    engine = vendor_services_wizard()
    assert engine.next() is False
    assert set(engine.errors) == {"category_id", "service_type"}
    engine.update_field("category_id", "catering-food")
    engine.update_field("service_type", "Buffet")
    assert engine.next() is True

    engine.update_field("festival_price_min", 20000)
    engine.update_field("festival_price_max", 10000)
    assert engine.next() is False
    assert engine.errors == {"festival_price_max": "Maximum price must not be below minimum"}


def test_changing_category_clears_subcategory():
    engine = service_card_wizard()
    assert engine.step.category_fields == {"category": None, "subcategory": "category"}

    engine.update_field("category", "venue-location")
    engine.update_field("subcategory", "banquet-halls")
    engine.update_field("category", "venue-location")
    assert engine.record.get("subcategory") == "banquet-halls"

    engine.update_field("category", "catering-food")
    assert engine.record.get("subcategory") == ""


def test_vendor_services_subcategory_follows_category_id():
    engine = vendor_services_wizard()
    engine.update_field("category_id", "entertainment")
    engine.update_field("subcategory", "dj-sound")

    engine.update_field("category_id", "decoration-styling")

    assert engine.record.get("subcategory") == ""
