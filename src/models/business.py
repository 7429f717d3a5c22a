"""
Business data model.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Business:
    """
    Typed business record. business_id is the join key for reviews.
    """
    business_id: str
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    stars: Optional[float] = None  # Average rating as reported by the source
    review_count: int = 0
    categories: Optional[str] = None  # Comma-delimited, e.g. "Food, Restaurants"

    def __post_init__(self):
        if self.review_count < 0:
            raise ValueError(f"Invalid review_count: {self.review_count}. Must be >= 0")

    def to_dict(self) -> dict:
        """Convert to a flat row for tabular output."""
        return {
            "business_id": self.business_id,
            "name": self.name,
            "city": self.city,
            "state": self.state,
            "stars": self.stars,
            "review_count": self.review_count,
            "categories": self.categories
        }
