from __future__ import annotations

from typing import Iterable, List

from event_planner.core.models.event import EVENT_TYPES, EventDetails, EventType
from event_planner.core.services.recommendations import RecommendationCriteria

MIN_BUDGET = 1000


def validate_event_details(details: EventDetails) -> List[str]:
    errors: List[str] = []
    if not details.date:
        errors.append("Event date is required")
    if not details.time:
        errors.append("Event time is required")
    if not details.location:
        errors.append("Event location is required")
    if not details.address:
        errors.append("Event address is required")
    if details.guest_count < 1:
        errors.append("Guest count must be at least 1")
    if details.budget < MIN_BUDGET:
        errors.append(f"Budget must be at least {MIN_BUDGET:,}")
    if details.duration < 1:
        errors.append("Event duration must be at least 1 hour")
    return errors


def find_event_type(event_type_id: str) -> EventType | None:
    return next((et for et in EVENT_TYPES if et.id == event_type_id), None)


def apply_event_type(details: EventDetails, event_type: EventType) -> EventDetails:
    """Seed budget, guests and duration from the event type's typical values."""
    details.event_type = event_type.id
    details.budget = event_type.budget_min
    details.guest_count = event_type.guests_min
    details.duration = event_type.typical_duration
    return details


def criteria_from_details(details: EventDetails, service_slugs: Iterable[str] = ()) -> RecommendationCriteria:
    event_type = find_event_type(details.event_type)
    return RecommendationCriteria(
        event_type=event_type.name if event_type else details.event_type,
        event_date=details.date,
        guest_count=details.guest_count,
        budget=details.budget,
        location=details.location,
        service_slugs=tuple(service_slugs),
    )
