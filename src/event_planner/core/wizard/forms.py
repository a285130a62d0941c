"""Concrete vendor-facing wizards built on `WizardEngine`."""

from __future__ import annotations

from event_planner.core.models.wizard import WizardRecord
from event_planner.core.services.drafts import DraftStore
from event_planner.core.services.submission import SubmissionSink
from event_planner.core.wizard.engine import WizardEngine, WizardStep
from event_planner.core.wizard.rules import (
    in_range,
    min_attachments,
    min_length,
    non_empty_list,
    ordered,
    positive,
    required,
    step_validator,
)

PRICE_TYPES = ["fixed", "per_hour", "per_day", "per_person", "custom"]
EVENT_PRICING_KEYS = ["wedding", "birthday", "corporate", "festival", "other"]

SERVICE_CARD_FIELDS = {
    "title": "",
    "description": "",
    "category": "",
    "subcategory": "",
    "base_price": 0,
    "price_type": "fixed",
    "event_type_pricing": {key: {"min": 0, "max": 0} for key in EVENT_PRICING_KEYS},
    "service_area": [],
    "max_capacity": 0,
    "min_booking_time": 1,
    "max_booking_time": 30,
    "advance_booking_days": 7,
    "inclusions": [],
    "exclusions": [],
    "equipment_provided": [],
    "cancellation_policy": "",
    "refund_policy": "",
    "working_days": [],
    "working_hours": {"start": "09:00", "end": "18:00"},
    "tags": [],
    "seo_description": "",
}
SERVICE_CARD_ATTACHMENTS = ("images", "videos")


def new_service_card_record() -> WizardRecord:
    return WizardRecord(SERVICE_CARD_FIELDS, SERVICE_CARD_ATTACHMENTS)


SERVICE_CARD_STEPS = [
    WizardStep(
        1,
        "Basic Info",
        step_validator(
            required("title", "Title is required"),
            min_length("title", 5, "Title must be at least 5 characters"),
            required("description", "Description is required"),
            required("category", "Category is required"),
        ),
        "Name and describe the service",
        ("title", "description", "category", "subcategory"),
        {"category": None, "subcategory": "category"},
    ),
    WizardStep(
        2,
        "Pricing",
        step_validator(
            positive("base_price", "Base price must be greater than 0"),
            *[
                ordered(f"event_type_pricing.{key}.min", f"event_type_pricing.{key}.max",
                        f"{key.capitalize()} maximum must not be below minimum", "event_type_pricing")
                for key in EVENT_PRICING_KEYS
            ],
        ),
        "Base price and per-event ranges",
        ("base_price", "price_type", "event_type_pricing"),
    ),
    WizardStep(
        3,
        "Service Details",
        step_validator(
            non_empty_list("service_area", "At least one service area is required"),
            positive("max_capacity", "Maximum capacity is required"),
            ordered("min_booking_time", "max_booking_time",
                    "Minimum booking time cannot exceed maximum booking time"),
        ),
        "Where and for how many guests",
        ("service_area", "max_capacity", "min_booking_time", "max_booking_time", "advance_booking_days",
         "inclusions", "exclusions", "equipment_provided"),
    ),
    WizardStep(
        4,
        "Media & Images",
        step_validator(min_attachments("images", 1, "At least one service image is required")),
        "Photos and videos of past events",
        ("images", "videos"),
    ),
    WizardStep(
        5,
        "Policies",
        description="Cancellation, refunds and availability",
        fields=("cancellation_policy", "refund_policy", "working_days", "working_hours", "tags", "seo_description"),
    ),
    WizardStep(6, "Preview", description="Check everything before publishing"),
]


def service_card_wizard(sink: SubmissionSink | None = None, drafts: DraftStore | None = None) -> WizardEngine:
    return WizardEngine("service_card", SERVICE_CARD_STEPS, new_service_card_record, sink=sink, drafts=drafts)


VENDOR_SERVICES_FIELDS = {
    "category_id": "",
    "subcategory": "",
    "secondary_services": [],
    "service_type": "",
    "wedding_price_min": 0,
    "wedding_price_max": 0,
    "corporate_price_min": 0,
    "corporate_price_max": 0,
    "birthday_price_min": 0,
    "birthday_price_max": 0,
    "festival_price_min": 0,
    "festival_price_max": 0,
    "basic_package_price": 0,
    "basic_package_details": "",
    "standard_package_price": 0,
    "standard_package_details": "",
    "premium_package_price": 0,
    "premium_package_details": "",
    "additional_services": "",
    "advance_payment_percentage": 50,
    "cancellation_policy": "",
}


def new_vendor_services_record() -> WizardRecord:
    return WizardRecord(VENDOR_SERVICES_FIELDS)


VENDOR_SERVICES_STEPS = [
    WizardStep(
        1,
        "Service",
        step_validator(
            required("category_id", "Category is required"),
            required("service_type", "Service type is required"),
        ),
        "Primary category and service type",
        ("category_id", "subcategory", "secondary_services", "service_type"),
        {"category_id": None, "subcategory": "category_id"},
    ),
    WizardStep(
        2,
        "Event Pricing",
        step_validator(
            *[
                ordered(f"{key}_price_min", f"{key}_price_max", "Maximum price must not be below minimum")
                for key in ("wedding", "corporate", "birthday", "festival")
            ]
        ),
        "Price ranges per event type",
        tuple(f"{key}_price_{bound}" for key in ("wedding", "corporate", "birthday", "festival") for bound in ("min", "max")),
    ),
    WizardStep(
        3,
        "Packages & Policies",
        step_validator(
            positive("basic_package_price", "Basic package price must be greater than 0"),
            in_range("advance_payment_percentage", 0, 100, "Advance payment must be between 0 and 100%"),
        ),
        "Package tiers, advance payment and cancellation",
        ("basic_package_price", "basic_package_details", "standard_package_price", "standard_package_details",
         "premium_package_price", "premium_package_details", "additional_services",
         "advance_payment_percentage", "cancellation_policy"),
    ),
]


def vendor_services_wizard(sink: SubmissionSink | None = None, drafts: DraftStore | None = None) -> WizardEngine:
    return WizardEngine("vendor_services", VENDOR_SERVICES_STEPS, new_vendor_services_record, sink=sink, drafts=drafts)
