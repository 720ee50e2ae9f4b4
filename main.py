"""
ReviewStats - Review Grouping Analytics

CLI entry point for running the analytics jobs.
"""

import argparse
import logging
import sys
import time

from reviewstats.engine.local_runner import LocalJobRunner
from reviewstats.orchestrator import ANALYSES, PipelineOrchestrator
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
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="ReviewStats - grouping analytics over product reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Users sharing at least 3 highly rated products
  python main.py affinity data/reviews.tsv

  # Every analysis over a directory of dumps
  python main.py all data/dumps/ --output-dir output/run-1

  # Top favourites with 8 worker threads
  python main.py favourites data/reviews.tsv --workers 8
        """
    )

    parser.add_argument(
        "analysis",
        choices=list(ANALYSES) + ["all"],
        help="Analysis to run"
    )

    parser.add_argument(
        "input",
        help="Input file, or directory containing one or more input files"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=settings.NUM_WORKERS,
        help=f"Worker threads (default: {settings.NUM_WORKERS})"
    )

    parser.add_argument(
        "--partitions",
        type=int,
        default=settings.NUM_PARTITIONS,
        help=f"Input partitions (default: {settings.NUM_PARTITIONS})"
    )

    parser.add_argument(
        "--keep-intermediate",
        action="store_true",
        default=settings.KEEP_INTERMEDIATE,
        help="Keep the affinity pass-1 output"
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
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.workers < 1 or args.partitions < 1:
        parser.error("--workers and --partitions must be at least 1")

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # Print banner
    print("=" * 60)
    print("ReviewStats - Review Grouping Analytics")
    print("=" * 60)
    print(f"Analysis: {args.analysis}")
    print(f"Input: {args.input}")
    print(f"Output: {args.output_dir}")
    print(f"Workers: {args.workers} ({args.partitions} partitions)")
    print("=" * 60)
    print()

    start = time.perf_counter()
    try:
        orchestrator = PipelineOrchestrator(
            output_root=args.output_dir,
            runner=LocalJobRunner(num_workers=args.workers, num_partitions=args.partitions),
            keep_intermediate=args.keep_intermediate
        )
        outputs = orchestrator.run(args.analysis, args.input)

        print()
        print("=" * 60)
        print("Pipeline completed successfully")
        print("=" * 60)
        for name, path in outputs.items():
            print(f"{name}: {path}")
        print(f"#Execution time in seconds : {time.perf_counter() - start:.3f}")
        print("=" * 60)

        logger.info("ReviewStats completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\nPipeline interrupted")
        return 1

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"#Execution time in seconds : {time.perf_counter() - start:.3f}")
        print(f"Check {settings.LOG_FILE} for details")
        return 1


if __name__ == "__main__":
    sys.exit(main())
