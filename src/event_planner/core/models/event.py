from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class EventType:
    id: str
    name: str
    budget_min: float
    budget_max: float
    typical_duration: int
    guests_min: int
    guests_max: int
    popular_services: List[str] = field(default_factory=list)


@dataclass
class EventDetails:
    """What the customer told us about the event; drives the recommendation query."""

    event_type: str = ""
    date: str = ""
    time: str = ""
    duration: int = 4
    location: str = ""
    address: str = ""
    guest_count: int = 50
    budget: float = 50000.0
    special_requirements: str = ""


EVENT_TYPES: List[EventType] = [
    EventType("wedding", "Wedding", 50000, 500000, 8, 50, 500,
              ["venue-location", "catering-food", "photography-videography", "decoration-styling", "entertainment"]),
    EventType("birthday-party", "Birthday Party", 5000, 50000, 4, 10, 100,
              ["venue-location", "catering-food", "decoration-styling", "entertainment"]),
    EventType("corporate-event", "Corporate Event", 10000, 100000, 6, 20, 200,
              ["venue-location", "catering-food", "technology-av", "decoration-styling"]),
    EventType("anniversary", "Anniversary", 15000, 100000, 6, 30, 150,
              ["venue-location", "catering-food", "photography-videography", "decoration-styling"]),
    EventType("baby-shower", "Baby Shower", 8000, 40000, 4, 20, 80,
              ["venue-location", "catering-food", "decoration-styling", "photography-videography"]),
    EventType("engagement", "Engagement", 20000, 150000, 5, 50, 200,
              ["venue-location", "catering-food", "photography-videography", "decoration-styling"]),
    EventType("conference", "Conference", 30000, 300000, 8, 100, 500,
              ["venue-location", "technology-av", "catering-food", "transportation"]),
]

# Share of the event budget expected to go to each category.
BUDGET_ALLOCATION = {
    "venue-location": 0.35,
    "catering-food": 0.25,
    "photography-videography": 0.15,
    "decoration-styling": 0.10,
    "entertainment": 0.08,
    "transportation": 0.05,
    "beauty-wellness": 0.02,
}
DEFAULT_ALLOCATION = 0.1

CATEGORY_NAMES = {
    "venue-location": "Venue & Location",
    "catering-food": "Catering & Food",
    "photography-videography": "Photography & Videography",
    "decoration-styling": "Decoration & Styling",
    "entertainment": "Entertainment",
}
