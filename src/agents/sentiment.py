"""
Sentiment Classification Agent.

Labels review text as Positive, Negative or Neutral from the VADER
compound polarity score.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, List, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from src.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)

POSITIVE = "Positive"
NEGATIVE = "Negative"
NEUTRAL = "Neutral"

_analyzer: Optional[SentimentIntensityAnalyzer] = None
_analyzer_lock = threading.Lock()


def get_analyzer() -> SentimentIntensityAnalyzer:
    """Return the process-wide analyzer, loading the lexicon on first use."""
    global _analyzer
    if _analyzer is None:
        with _analyzer_lock:
            if _analyzer is None:
                logger.info("Loading VADER lexicon")
                _analyzer = SentimentIntensityAnalyzer()
    return _analyzer


def reset_analyzer() -> None:
    """Drop the cached analyzer so the next call rebuilds it."""
    global _analyzer
    with _analyzer_lock:
        _analyzer = None


def label_for_score(
    score: float,
    positive_threshold: float = settings.POSITIVE_THRESHOLD,
    negative_threshold: float = settings.NEGATIVE_THRESHOLD
) -> str:
    """
    Map a compound score in [-1, 1] to a sentiment label.

    score >= positive_threshold -> Positive
    score <= negative_threshold -> Negative
    otherwise                   -> Neutral
    """
    if score >= positive_threshold:
        return POSITIVE
    if score <= negative_threshold:
        return NEGATIVE
    return NEUTRAL


def compound_score(text: Any) -> float:
    """Compound polarity of text; null or blank text scores 0."""
    if text is None:
        return 0.0
    if not isinstance(text, str):
        text = str(text)
    if not text.strip():
        return 0.0
    return get_analyzer().polarity_scores(text)["compound"]


def classify(text: Any) -> str:
    """Classify text as Positive, Negative or Neutral. Never raises on empty input."""
    return label_for_score(compound_score(text))


class SentimentClassificationAgent:
    """
    Attaches a sentiment label to each review.

    Reviews are immutable, so classification returns new Review objects.
    With max_workers > 1 the texts are scored on a thread pool sharing the
    single analyzer; output order always matches input order.
    """

    def __init__(self, max_workers: int = 1):
        """
        Initialize classification agent.

        Args:
            max_workers: Threads used to score reviews (1 = sequential)
        """
        if max_workers < 1:
            raise ValueError(f"Invalid max_workers: {max_workers}. Must be >= 1")
        self.max_workers = max_workers

        # Warm the lexicon before any worker thread starts
        get_analyzer()

        logger.info(f"Initialized SentimentClassificationAgent with max_workers={max_workers}")

    def classify_reviews(self, reviews: List[Review]) -> List[Review]:
        """
        Classify every review.

        Args:
            reviews: Normalized reviews

        Returns:
            New list of reviews with sentiment set
        """
        texts = [review.text for review in reviews]

        if self.max_workers == 1 or len(reviews) < 2:
            labels = [classify(text) for text in texts]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                labels = list(executor.map(classify, texts))

        classified = [
            replace(review, sentiment=label)
            for review, label in zip(reviews, labels)
        ]

        logger.info(f"Classified {len(classified)} reviews")
        return classified
