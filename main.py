"""
Yelp Review Insights

CLI entry point for running the batch pipeline.
"""

import argparse
import logging
import sys

from src.orchestrator import PipelineOrchestrator
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Yelp Review Insights - sentiment and category analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest both datasets and run every query
  python main.py --reviews yelp/reviews/ \\
                 --businesses yelp/yelp_academic_dataset_business.json

  # Re-run analytics on the documents staged by the last ingest
  python main.py

  # Drop malformed documents instead of failing the batch
  python main.py --reviews yelp/reviews/ --businesses yelp/business.json \\
                 --on-malformed skip --workers 4
        """
    )

    parser.add_argument(
        "--reviews",
        help="Review JSON file or directory (default: reuse staged reviews)"
    )

    parser.add_argument(
        "--businesses",
        help="Business JSON file or directory (default: reuse staged businesses)"
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Staging and table directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Query result directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--on-malformed",
        default=settings.ON_MALFORMED,
        choices=["fail", "skip"],
        help=f"Malformed document policy (default: {settings.ON_MALFORMED})"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=settings.CLASSIFICATION_MAX_WORKERS,
        help=f"Sentiment classification threads (default: {settings.CLASSIFICATION_MAX_WORKERS})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    print("=" * 60)
    print("Yelp Review Insights")
    print("=" * 60)
    print(f"Reviews: {args.reviews or '(staged)'}")
    print(f"Businesses: {args.businesses or '(staged)'}")
    print(f"On malformed: {args.on_malformed}")
    print("=" * 60)
    print()

    try:
        logger.info("Initializing pipeline...")
        orchestrator = PipelineOrchestrator(
            data_root=args.data_root,
            output_dir=args.output_dir,
            on_malformed=args.on_malformed,
            max_workers=args.workers
        )

        metadata_path = orchestrator.run(
            reviews_path=args.reviews,
            businesses_path=args.businesses
        )

        print()
        print("=" * 60)
        print("Pipeline completed successfully!")
        print("=" * 60)
        print(f"Query results: {args.output_dir}")
        print(f"Metadata: {metadata_path}")
        print("=" * 60)

        logger.info("Yelp Review Insights completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\nPipeline interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
