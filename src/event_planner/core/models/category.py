from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCategory:
    """Reference data for one kind of vendor service (venue, catering, ...)."""

    id: str
    name: str
    slug: str
    icon: str = ""
    sort_order: int = 0
    is_active: bool = True
    parent_id: str | None = None
    description: str = ""
