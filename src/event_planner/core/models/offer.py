from dataclasses import dataclass, field
from typing import List

from event_planner.core.models.category import ServiceCategory


@dataclass(frozen=True)
class VendorProfile:
    id: str
    business_name: str = ""
    city: str = ""
    verification_status: str = "pending"


@dataclass(frozen=True)
class VendorOffer:
    """One vendor's priced listing (a "vendor card") within a single category."""

    id: str
    vendor: VendorProfile
    category: ServiceCategory
    title: str
    description: str = ""
    base_price: float = 0.0
    average_rating: float = 0.0
    total_reviews: int = 0
    max_capacity: int | None = None
    service_area: List[str] = field(default_factory=list)
    featured: bool = False
    match_percentage: int | None = None
    match_reasons: List[str] = field(default_factory=list)

    @property
    def category_id(self) -> str:
        return self.category.id
