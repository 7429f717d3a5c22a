"""
Unit tests for Review Analytics queries.
"""

from datetime import date

import pytest

from src.agents.aggregation import ReviewAnalytics
from src.models.business import Business
from src.models.review import Review


def _review(business_id, user_id, day, stars=3, sentiment="Neutral", text="ok"):
    return Review(
        business_id=business_id,
        user_id=user_id,
        date=day,
        stars=stars,
        text=text,
        sentiment=sentiment
    )


@pytest.fixture
def analytics():
    businesses = [
        Business("b1", name="Taco Spot", city="Tucson", state="AZ", stars=4.5,
                 review_count=120, categories="Mexican, Restaurants"),
        Business("b2", name="Nail Bar", city="Tucson", state="AZ", stars=3.0,
                 review_count=40, categories="Beauty & Spas,Nail Salons"),
        Business("b3", name="Pho House", city="Reno", state="NV", stars=4.0,
                 review_count=80, categories="Restaurants, Vietnamese"),
        Business("b4", name="Empty", city="Reno", state="NV", stars=None,
                 review_count=5, categories=None),
    ]
    reviews = [
        _review("b1", "alice", date(2024, 1, 5), stars=5, sentiment="Positive"),
        _review("b1", "bob", date(2024, 1, 7), stars=4, sentiment="Positive"),
        _review("b1", "alice", date(2024, 2, 1), stars=5, sentiment="Positive"),
        _review("b1", "carol", date(2024, 2, 3), stars=1, sentiment="Negative"),
        _review("b2", "alice", date(2024, 2, 3), stars=2, sentiment="Negative"),
        _review("b3", "bob", date(2024, 2, 10), stars=5, sentiment="Positive"),
        _review("b3", "alice", date(2024, 2, 11), stars=3, sentiment="Neutral"),
        _review("ghost", "dave", date(2024, 3, 1), stars=5, sentiment="Positive"),
    ]
    return ReviewAnalytics.from_records(reviews, businesses)


def test_category_popularity_minimal():
    businesses = [Business("1", categories="A,B"), Business("2", categories="A")]
    result = ReviewAnalytics.from_records([], businesses).category_popularity()

    assert result.values.tolist() == [["A", 2], ["B", 1]]


def test_category_popularity_counts_distinct_pairs():
    businesses = [Business("1", categories="A, A,B"), Business("2", categories="B")]
    result = ReviewAnalytics.from_records([], businesses).category_popularity()

    # Tie on count is broken by category name
    assert result.values.tolist() == [["B", 2], ["A", 1]]


def test_category_popularity_top_n(analytics):
    result = analytics.category_popularity(top_n=1)

    assert result.values.tolist() == [["Restaurants", 2]]


def test_top_reviewers_in_category(analytics):
    result = analytics.top_reviewers_in_category("RESTAURANT")

    # alice reviewed b1 twice and b3 once; bob b1 and b3; carol only b1
    assert result.values.tolist() == [["alice", 2], ["bob", 2], ["carol", 1]]


def test_top_reviewers_in_category_no_match(analytics):
    result = analytics.top_reviewers_in_category("bowling")

    assert result.empty
    assert list(result.columns) == ["user_id", "business_count"]


def test_recent_reviews_keeps_k_per_business(analytics):
    result = analytics.recent_reviews(k=2)

    counts = result.groupby("business_id").size().to_dict()
    assert counts == {"b1": 2, "b2": 1, "b3": 2}

    b1 = result[result["business_id"] == "b1"]
    assert b1["user_id"].tolist() == ["carol", "alice"]
    assert b1["rank"].tolist() == [1, 2]


def test_recent_reviews_drops_orphans(analytics):
    result = analytics.recent_reviews(k=10)

    assert "ghost" not in set(result["business_id"])
    assert len(result) == 7


def test_recent_reviews_tie_break_on_user_id():
    businesses = [Business("b1", name="X")]
    reviews = [
        _review("b1", "zed", date(2024, 1, 1)),
        _review("b1", "amy", date(2024, 1, 1)),
    ]
    result = ReviewAnalytics.from_records(reviews, businesses).recent_reviews(k=1)

    assert result["user_id"].tolist() == ["amy"]


def test_five_star_percentage():
    businesses = [Business("b1", name="Busy", review_count=100)]
    reviews = [
        _review("b1", f"u{i}", date(2024, 1, 1), stars=5 if i < 40 else 3)
        for i in range(100)
    ]
    result = ReviewAnalytics.from_records(reviews, businesses).five_star_percentage()

    row = result.iloc[0]
    assert row["total_reviews"] == 100
    assert row["five_star_reviews"] == 40
    assert row["five_star_percent"] == 40.0


def test_five_star_percentage_threshold(analytics):
    result = analytics.five_star_percentage(min_review_count=2)

    assert result["business_id"].tolist() == ["b1", "b3"]
    assert result["five_star_percent"].tolist() == [50.0, 50.0]


def test_top_businesses_per_city(analytics):
    result = analytics.top_businesses_per_city(k=1)

    assert result[["city", "business_id", "rank"]].values.tolist() == [
        ["Reno", "b3", 1],
        ["Tucson", "b1", 1],
    ]


def test_top_businesses_per_city_row_count(analytics):
    result = analytics.top_businesses_per_city(k=5)

    # min(k, partition size) rows per city
    assert result.groupby("city").size().to_dict() == {"Reno": 2, "Tucson": 2}


def test_category_review_volume(analytics):
    result = analytics.category_review_volume()

    volumes = dict(result.values.tolist())
    assert volumes["Restaurants"] == 6
    assert volumes["Mexican"] == 4
    assert volumes["Nail Salons"] == 1


def test_reviews_per_month(analytics):
    result = analytics.reviews_per_month()

    assert result.values.tolist() == [["2024-02", 5], ["2024-01", 2], ["2024-03", 1]]


def test_average_rating(analytics):
    result = analytics.average_rating(min_review_count=2)

    assert result["business_id"].tolist() == ["b3", "b1"]
    assert result["average_stars"].tolist() == [4.0, 3.75]


def test_top_reviewers(analytics):
    result = analytics.top_reviewers(top_n=2)

    assert result.values.tolist() == [["alice", 4], ["bob", 2]]


def test_top_positive_businesses(analytics):
    result = analytics.top_positive_businesses()

    assert result[["business_id", "positive_reviews"]].values.tolist() == [["b1", 3], ["b3", 1]]


def test_sentiment_distribution(analytics):
    result = analytics.sentiment_distribution()

    assert result.values.tolist() == [["Positive", 5], ["Negative", 2], ["Neutral", 1]]


def test_run_all_on_empty_tables():
    results = ReviewAnalytics.from_records([], []).run_all()

    assert len(results) == 11
    assert all(df.empty for df in results.values())


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
