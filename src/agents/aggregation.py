"""
Review Analytics.

Read-only aggregate queries over the normalized review and business
tables. Every query returns a fresh DataFrame and keeps no state.

Ties are broken deterministically by the natural key of the grouped
entity (category, user_id, business_id or month ascending).
"""

import logging
from typing import Dict, List

import pandas as pd

from src.models.business import Business
from src.models.review import Review
from src.utils.categories import explode_categories
import config.settings as settings

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = ["business_id", "user_id", "date", "stars", "text", "sentiment"]
BUSINESS_COLUMNS = [
    "business_id", "name", "city", "state", "stars", "review_count", "categories"
]


def reviews_frame(reviews: List[Review]) -> pd.DataFrame:
    """Tabulate reviews in ingest order."""
    return pd.DataFrame([r.to_dict() for r in reviews], columns=REVIEW_COLUMNS)


def businesses_frame(businesses: List[Business]) -> pd.DataFrame:
    """Tabulate businesses."""
    return pd.DataFrame([b.to_dict() for b in businesses], columns=BUSINESS_COLUMNS)


def _rank_within(df: pd.DataFrame, partition: str, order_by: List[str], ascending: List[bool]) -> pd.DataFrame:
    """
    Assign a 1-based row number within each partition.

    Rows are sorted by (partition, *order_by); the sort is stable, so rows
    equal on every key keep their input order.
    """
    ordered = df.sort_values(
        by=[partition] + order_by,
        ascending=[True] + ascending,
        kind="mergesort"
    ).copy()
    ordered["rank"] = ordered.groupby(partition, sort=False, dropna=False).cumcount() + 1
    return ordered


class ReviewAnalytics:
    """
    Descriptive queries over reviews and businesses.

    Joins between the two tables are inner joins: reviews whose business
    is unknown are left out of join-based results.
    """

    def __init__(
        self,
        reviews: pd.DataFrame,
        businesses: pd.DataFrame,
        category_delimiter: str = settings.CATEGORY_DELIMITER
    ):
        """
        Initialize analytics.

        Args:
            reviews: Table with REVIEW_COLUMNS
            businesses: Table with BUSINESS_COLUMNS (business_id unique)
            category_delimiter: Separator used in the categories column
        """
        self.reviews = reviews
        self.businesses = businesses
        self.category_delimiter = category_delimiter

    @classmethod
    def from_records(
        cls,
        reviews: List[Review],
        businesses: List[Business],
        category_delimiter: str = settings.CATEGORY_DELIMITER
    ) -> "ReviewAnalytics":
        return cls(reviews_frame(reviews), businesses_frame(businesses), category_delimiter)

    def _memberships(self) -> pd.DataFrame:
        return explode_categories(self.businesses, self.category_delimiter)

    def _joined(self) -> pd.DataFrame:
        """Reviews with business name, city and categories attached."""
        return self.reviews.merge(
            self.businesses[["business_id", "name", "city", "categories"]],
            on="business_id",
            how="inner"
        )

    def category_popularity(self, top_n: int = settings.TOP_N) -> pd.DataFrame:
        """Number of businesses listed under each category."""
        memberships = self._memberships().drop_duplicates()
        if memberships.empty:
            return pd.DataFrame(columns=["category", "business_count"])

        counts = (
            memberships.groupby("category").size()
            .reset_index(name="business_count")
            .sort_values(["business_count", "category"], ascending=[False, True])
        )
        return counts.head(top_n).reset_index(drop=True)

    def top_reviewers_in_category(
        self,
        pattern: str = settings.CATEGORY_FILTER,
        top_n: int = settings.TOP_N
    ) -> pd.DataFrame:
        """
        Users who reviewed the most distinct businesses whose categories
        contain pattern (case-insensitive substring).
        """
        columns = ["user_id", "business_count"]
        matches = self.businesses["categories"].fillna("").astype(str).str.lower().str.contains(
            pattern.lower(), regex=False
        )
        matching_ids = self.businesses.loc[matches, ["business_id"]]
        reviewed = self.reviews.merge(matching_ids, on="business_id", how="inner")
        if reviewed.empty:
            return pd.DataFrame(columns=columns)

        counts = (
            reviewed.groupby("user_id")["business_id"].nunique()
            .reset_index(name="business_count")
            .sort_values(["business_count", "user_id"], ascending=[False, True])
        )
        return counts.head(top_n).reset_index(drop=True)[columns]

    def category_review_volume(self, top_n: int = settings.TOP_N) -> pd.DataFrame:
        """Number of reviews received by businesses in each category."""
        columns = ["category", "review_count"]
        joined = self.reviews[["business_id"]].merge(
            self._memberships().drop_duplicates(), on="business_id", how="inner"
        )
        if joined.empty:
            return pd.DataFrame(columns=columns)

        counts = (
            joined.groupby("category").size()
            .reset_index(name="review_count")
            .sort_values(["review_count", "category"], ascending=[False, True])
        )
        return counts.head(top_n).reset_index(drop=True)

    def recent_reviews(self, k: int = settings.RECENT_REVIEWS_PER_BUSINESS) -> pd.DataFrame:
        """
        The k most recent reviews of each business.

        Ties on date are ordered by user_id, then by ingest order.
        """
        columns = [
            "business_id", "name", "user_id", "date", "stars", "text", "sentiment", "rank"
        ]
        joined = self._joined()
        if joined.empty:
            return pd.DataFrame(columns=columns)

        ranked = _rank_within(joined, "business_id", ["date", "user_id"], [False, True])
        return ranked[ranked["rank"] <= k][columns].reset_index(drop=True)

    def reviews_per_month(self) -> pd.DataFrame:
        """Review counts per calendar month (YYYY-MM), busiest first."""
        columns = ["month", "review_count"]
        if self.reviews.empty:
            return pd.DataFrame(columns=columns)

        months = pd.to_datetime(self.reviews["date"]).dt.strftime("%Y-%m")
        counts = (
            months.value_counts()
            .rename_axis("month")
            .reset_index(name="review_count")
            .sort_values(["review_count", "month"], ascending=[False, True])
        )
        return counts.reset_index(drop=True)[columns]

    def five_star_percentage(self, min_review_count: int = settings.FIVE_STAR_MIN_REVIEWS) -> pd.DataFrame:
        """
        Share of 5-star reviews per business.

        Only businesses with at least min_review_count reviews in the reviews
        table are reported; percentage = five_star_reviews * 100 / total_reviews.
        """
        columns = [
            "business_id", "name", "total_reviews", "five_star_reviews", "five_star_percent"
        ]
        joined = self._joined()
        if joined.empty:
            return pd.DataFrame(columns=columns)

        joined["is_five_star"] = (joined["stars"] == 5).astype(int)
        stats = (
            joined.groupby(["business_id", "name"], dropna=False)
            .agg(total_reviews=("stars", "size"), five_star_reviews=("is_five_star", "sum"))
            .reset_index()
        )
        stats = stats[stats["total_reviews"] >= min_review_count].copy()
        stats["five_star_percent"] = stats["five_star_reviews"] * 100.0 / stats["total_reviews"]
        stats = stats.sort_values(["five_star_percent", "business_id"], ascending=[False, True])
        return stats.reset_index(drop=True)[columns]

    def top_businesses_per_city(self, k: int = settings.TOP_BUSINESSES_PER_CITY) -> pd.DataFrame:
        """The k businesses with the highest review_count in each city."""
        columns = ["city", "business_id", "name", "review_count", "rank"]
        if self.businesses.empty:
            return pd.DataFrame(columns=columns)

        ranked = _rank_within(
            self.businesses, "city", ["review_count", "business_id"], [False, True]
        )
        return ranked[ranked["rank"] <= k][columns].reset_index(drop=True)

    def average_rating(self, min_review_count: int = settings.AVERAGE_RATING_MIN_REVIEWS) -> pd.DataFrame:
        """Mean review stars for businesses with at least min_review_count reviews."""
        columns = ["business_id", "name", "review_count", "average_stars"]
        joined = self._joined()
        if joined.empty:
            return pd.DataFrame(columns=columns)

        stats = (
            joined.groupby(["business_id", "name"], dropna=False)
            .agg(review_count=("stars", "size"), average_stars=("stars", "mean"))
            .reset_index()
        )
        stats = stats[stats["review_count"] >= min_review_count]
        stats = stats.sort_values(["average_stars", "business_id"], ascending=[False, True])
        return stats.reset_index(drop=True)[columns]

    def top_reviewers(self, top_n: int = settings.TOP_N) -> pd.DataFrame:
        """Users who wrote the most reviews."""
        columns = ["user_id", "review_count"]
        if self.reviews.empty:
            return pd.DataFrame(columns=columns)

        counts = (
            self.reviews.groupby("user_id").size()
            .reset_index(name="review_count")
            .sort_values(["review_count", "user_id"], ascending=[False, True])
        )
        return counts.head(top_n).reset_index(drop=True)

    def top_positive_businesses(self, top_n: int = settings.TOP_N) -> pd.DataFrame:
        """Businesses with the most reviews labelled Positive."""
        columns = ["business_id", "name", "positive_reviews"]
        joined = self._joined()
        positive = joined[joined["sentiment"] == "Positive"]
        if positive.empty:
            return pd.DataFrame(columns=columns)

        counts = (
            positive.groupby(["business_id", "name"], dropna=False).size()
            .reset_index(name="positive_reviews")
            .sort_values(["positive_reviews", "business_id"], ascending=[False, True])
        )
        return counts.head(top_n).reset_index(drop=True)[columns]

    def sentiment_distribution(self) -> pd.DataFrame:
        """Number of reviews per sentiment label."""
        columns = ["sentiment", "review_count"]
        labelled = self.reviews.dropna(subset=["sentiment"])
        if labelled.empty:
            return pd.DataFrame(columns=columns)

        counts = (
            labelled.groupby("sentiment").size()
            .reset_index(name="review_count")
            .sort_values(["review_count", "sentiment"], ascending=[False, True])
        )
        return counts.reset_index(drop=True)

    def run_all(self) -> Dict[str, pd.DataFrame]:
        """Evaluate every query with the configured parameters."""
        results = {
            "category_popularity": self.category_popularity(),
            "top_reviewers_in_category": self.top_reviewers_in_category(),
            "category_review_volume": self.category_review_volume(),
            "recent_reviews": self.recent_reviews(),
            "reviews_per_month": self.reviews_per_month(),
            "five_star_percentage": self.five_star_percentage(),
            "top_businesses_per_city": self.top_businesses_per_city(),
            "average_rating": self.average_rating(),
            "top_reviewers": self.top_reviewers(),
            "top_positive_businesses": self.top_positive_businesses(),
            "sentiment_distribution": self.sentiment_distribution(),
        }

        for name, df in results.items():
            logger.info(f"Query {name}: {len(df)} rows")

        return results
