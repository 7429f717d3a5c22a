"""
Schema Normalization Agent.

Projects staged JSON documents into typed Review and Business records.
Projection functions are pure and independent of how documents were read.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from src.models.business import Business
from src.models.raw_record import RawRecord
from src.models.review import Review

logger = logging.getLogger(__name__)


class RecordMappingError(ValueError):
    """Raised when a document cannot be projected into a typed record."""


def _require(document: Dict[str, Any], key: str) -> Any:
    value = document.get(key)
    if value is None:
        raise RecordMappingError(f"Missing required field '{key}'")
    return value


def _as_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_date(value: Any) -> date:
    """Take the calendar date of a 'YYYY-MM-DD[ HH:MM:SS]' timestamp."""
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError as e:
        raise RecordMappingError(f"Invalid date: {value!r}") from e


def _as_int(value: Any, field_name: str) -> int:
    """Cast whole numbers such as 5, 5.0 or "5"; fractional values are rejected."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise RecordMappingError(f"Invalid {field_name}: {value!r}") from e
    if not number.is_integer():
        raise RecordMappingError(f"Invalid {field_name}: {value!r} is not a whole number")
    return int(number)


def _as_float(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise RecordMappingError(f"Invalid {field_name}: {value!r}") from e


def project_review(document: Dict[str, Any]) -> Review:
    """
    Map a review document onto a Review.

    Raises:
        RecordMappingError: If a required field is missing or cannot be cast
    """
    try:
        return Review(
            business_id=str(_require(document, "business_id")),
            user_id=str(_require(document, "user_id")),
            date=_as_date(_require(document, "date")),
            stars=_as_int(_require(document, "stars"), "stars"),
            text=_as_string(document.get("text"))
        )
    except RecordMappingError:
        raise
    except ValueError as e:
        # Model validation (e.g. stars out of range)
        raise RecordMappingError(str(e)) from e


def project_business(document: Dict[str, Any]) -> Business:
    """
    Map a business document onto a Business.

    Raises:
        RecordMappingError: If business_id is missing or a value cannot be cast
    """
    review_count = document.get("review_count")
    try:
        return Business(
            business_id=str(_require(document, "business_id")),
            name=_as_string(document.get("name")),
            city=_as_string(document.get("city")),
            state=_as_string(document.get("state")),
            stars=_as_float(document.get("stars"), "stars"),
            review_count=0 if review_count is None else _as_int(review_count, "review_count"),
            categories=_as_string(document.get("categories"))
        )
    except RecordMappingError:
        raise
    except ValueError as e:
        raise RecordMappingError(str(e)) from e


class SchemaNormalizationAgent:
    """
    Converts staged raw records into typed records.

    Unmappable records follow the same policy as ingestion:
    "fail" raises, "skip" logs and drops the record.
    """

    def __init__(self, on_malformed: str = "fail"):
        """
        Initialize normalization agent.

        Args:
            on_malformed: "fail" or "skip"
        """
        if on_malformed not in ("fail", "skip"):
            raise ValueError(
                f"Invalid on_malformed policy: {on_malformed}. Must be 'fail' or 'skip'"
            )
        self.on_malformed = on_malformed

    def normalize_reviews(self, records: List[RawRecord]) -> List[Review]:
        """Project raw review documents into Review records."""
        reviews = self._project_all(records, project_review, "review")
        logger.info(f"Normalized {len(reviews)} of {len(records)} review documents")
        return reviews

    def normalize_businesses(self, records: List[RawRecord]) -> List[Business]:
        """
        Project raw business documents into Business records.

        business_id is unique: a later document for the same id replaces
        the earlier one.
        """
        businesses = self._project_all(records, project_business, "business")

        by_id: Dict[str, Business] = {}
        for business in businesses:
            by_id.pop(business.business_id, None)
            by_id[business.business_id] = business

        duplicates = len(businesses) - len(by_id)
        if duplicates:
            logger.warning(f"Dropped {duplicates} duplicate business documents (kept last)")

        logger.info(f"Normalized {len(by_id)} of {len(records)} business documents")
        return list(by_id.values())

    def _project_all(
        self,
        records: List[RawRecord],
        project: Callable[[Dict[str, Any]], Any],
        kind: str
    ) -> list:
        projected = []
        for record in records:
            try:
                projected.append(project(record.document))
            except RecordMappingError as e:
                message = f"Cannot map {kind} at {record.source}:{record.line_number}: {e}"
                if self.on_malformed == "fail":
                    raise RecordMappingError(message) from e
                logger.warning(f"{message} (skipped)")
        return projected
