"""
Review data model.

Represents a typed review projected from a staged JSON document.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

SENTIMENT_LABELS = ("Positive", "Negative", "Neutral")


@dataclass(frozen=True)
class Review:
    """
    Typed review record.
    Sentiment is derived from text during classification, never read from the source.
    """
    business_id: str
    user_id: str
    date: date
    stars: int  # 1-5 star rating
    text: Optional[str] = None
    sentiment: Optional[str] = None  # "Positive", "Negative", "Neutral" once classified

    def __post_init__(self):
        # Validate rating
        if not (1 <= self.stars <= 5):
            raise ValueError(f"Invalid stars: {self.stars}. Must be 1-5")

        # Validate sentiment
        if self.sentiment is not None and self.sentiment not in SENTIMENT_LABELS:
            raise ValueError(
                f"Invalid sentiment: {self.sentiment}. Must be one of {', '.join(SENTIMENT_LABELS)}"
            )

    def to_dict(self) -> dict:
        """Convert to a flat row for tabular output."""
        return {
            "business_id": self.business_id,
            "user_id": self.user_id,
            "date": self.date,
            "stars": self.stars,
            "text": self.text,
            "sentiment": self.sentiment
        }
