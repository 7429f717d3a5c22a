"""
Configuration settings for Yelp Review Insights.

Centralized configuration for all pipeline stages and analytic queries.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("YELP_INSIGHTS_DATA_ROOT", PROJECT_ROOT / "data"))
OUTPUT_ROOT = Path(os.getenv("YELP_INSIGHTS_OUTPUT_ROOT", PROJECT_ROOT / "output"))

# Ingestion
INPUT_FILE_SUFFIXES = (".json", ".jsonl", ".ndjson")
ON_MALFORMED = os.getenv("YELP_INSIGHTS_ON_MALFORMED", "fail")  # "fail" or "skip"

# Sentiment thresholds on the VADER compound score
POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05
CLASSIFICATION_MAX_WORKERS = 1

# Category handling
CATEGORY_DELIMITER = ","

# Analytic queries
TOP_N = 10
CATEGORY_FILTER = "restaurant"  # Case-insensitive substring for top reviewers
RECENT_REVIEWS_PER_BUSINESS = 3
TOP_BUSINESSES_PER_CITY = 5
FIVE_STAR_MIN_REVIEWS = 1
AVERAGE_RATING_MIN_REVIEWS = 100

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "yelp_insights.log"
