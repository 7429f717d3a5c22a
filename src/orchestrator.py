"""
Pipeline Orchestrator.

Coordinates the batch stages: ingest, normalize, classify, analyze.
"""

import logging
from datetime import datetime
from typing import List, Optional

from src.agents.ingestion import IngestionAgent
from src.agents.normalization import SchemaNormalizationAgent
from src.agents.sentiment import SentimentClassificationAgent
from src.agents.aggregation import ReviewAnalytics, reviews_frame, businesses_frame
from src.models.raw_record import RawRecord
from src.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Orchestrates the single-pass batch pipeline.

    Coordinates:
    1. Ingestion (staged wholesale) → 2. Normalization → 3. Classification
    → 4. Analytics → 5. Output
    """

    def __init__(
        self,
        data_root: str,
        output_dir: str,
        on_malformed: str = settings.ON_MALFORMED,
        max_workers: int = settings.CLASSIFICATION_MAX_WORKERS
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            data_root: Root directory for staging and normalized tables
            output_dir: Directory for query result CSVs
            on_malformed: "fail" or "skip" for malformed input documents
            max_workers: Threads used by the sentiment classifier
        """
        self.data_root = str(data_root)
        self.output_dir = str(output_dir)

        logger.info("Initializing pipeline components...")

        self.storage = StorageManager(self.data_root)
        self.ingestion_agent = IngestionAgent(
            on_malformed=on_malformed,
            file_suffixes=settings.INPUT_FILE_SUFFIXES
        )
        self.normalization_agent = SchemaNormalizationAgent(on_malformed=on_malformed)
        self.classification_agent = SentimentClassificationAgent(max_workers=max_workers)

        logger.info("Pipeline initialized successfully")

    def run(
        self,
        reviews_path: Optional[str] = None,
        businesses_path: Optional[str] = None
    ) -> str:
        """
        Run the complete pipeline.

        Args:
            reviews_path: Review JSON file or directory; None reuses staged reviews
            businesses_path: Business JSON file or directory; None reuses staged businesses

        Returns:
            Path to the run metadata JSON
        """
        start_time = datetime.now()

        # STAGE 1: Ingestion (staging is only replaced once every input has loaded)
        raw_reviews = self._ingest("reviews", reviews_path)
        raw_businesses = self._ingest("businesses", businesses_path)

        if reviews_path is not None:
            self.storage.save_staged_records("reviews", raw_reviews)
        if businesses_path is not None:
            self.storage.save_staged_records("businesses", raw_businesses)

        # STAGE 2: Normalization
        reviews = self.normalization_agent.normalize_reviews(raw_reviews)
        businesses = self.normalization_agent.normalize_businesses(raw_businesses)

        # STAGE 3: Classification
        reviews = self.classification_agent.classify_reviews(reviews)

        self.storage.save_table("reviews", reviews_frame(reviews))
        self.storage.save_table("businesses", businesses_frame(businesses))

        # STAGE 4: Analytics
        analytics = ReviewAnalytics.from_records(reviews, businesses)
        results = analytics.run_all()

        # STAGE 5: Output
        processing_time = (datetime.now() - start_time).total_seconds()
        metadata_path = self.storage.save_query_results(
            results,
            self.output_dir,
            metadata={
                "raw_reviews": len(raw_reviews),
                "raw_businesses": len(raw_businesses),
                "reviews": len(reviews),
                "businesses": len(businesses),
                "processing_time_seconds": processing_time
            }
        )

        logger.info(
            f"Pipeline complete: {len(reviews)} reviews, {len(businesses)} businesses "
            f"→ {len(results)} query results"
        )
        return metadata_path

    def _ingest(self, name: str, path: Optional[str]) -> List[RawRecord]:
        """Load a dataset from path, or fall back to what is already staged."""
        if path is None:
            records = self.storage.load_staged_records(name)
            if records is None:
                raise FileNotFoundError(
                    f"No input path given for {name} and nothing staged in {self.storage.staging_dir}"
                )
            logger.info(f"Reusing {len(records)} staged {name} documents")
            return records

        return self.ingestion_agent.load(path)
