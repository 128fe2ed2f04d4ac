"""CLI entry point for the Drucksache pipelines.

Usage:
    # One full sync of bill drafts from DIP
    python -m democrat --mode sync

    # One enrichment batch
    python -m democrat --mode enrich --batch-size 5

    # Create the Qdrant collection and payload indexes
    python -m democrat --mode ensure-collection

    # Run sync and enrichment periodically until interrupted
    python -m democrat --mode schedule
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from democrat.ai.vector_store import QdrantVectorStore
from democrat.core.utils import set_logging_level
from democrat.pipeline import build_orchestrator, build_sync_engine, get_repository
from democrat.scheduler import Scheduler
from democrat.settings import ENVIRONMENT


def main() -> int:
    """Main entry point for the pipeline CLI."""

    parser = argparse.ArgumentParser(
        description="DIP Drucksache sync and AI enrichment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--mode",
        choices=["sync", "enrich", "schedule", "ensure-collection"],
        default="sync",
        help="sync (one DIP pass), enrich (one AI batch), schedule (both, periodically) "
        "or ensure-collection (Qdrant setup)",
    )

    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Documents per enrichment batch (default: ENRICHMENT_BATCH_SIZE)",
    )

    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Stop the sync after this many DIP pages (default: unlimited)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    set_logging_level(
        logging.DEBUG if args.verbose else logging.INFO,
        service_name="pipeline",
        environment=ENVIRONMENT,
    )
    logger = logging.getLogger(__name__)
    logger.info(f"Starting democrat: mode={args.mode}")

    scheduler = None

    try:
        repository = get_repository()

        if args.mode == "ensure-collection":
            QdrantVectorStore().ensure_collection()
            logger.info("Qdrant collection ready")

        elif args.mode == "sync":
            engine = build_sync_engine(repository)
            engine.max_pages = args.max_pages
            result = engine.sync()
            logger.info(f"Sync complete: {result}")
            if result.errors and not result.synced:
                return 1

        elif args.mode == "enrich":
            orchestrator = build_orchestrator(repository)
            if args.batch_size:
                orchestrator.batch_size = args.batch_size
            result = orchestrator.run()
            logger.info(f"Enrichment complete: {result}")

        else:  # schedule
            QdrantVectorStore().ensure_collection()
            orchestrator = build_orchestrator(repository)
            if args.batch_size:
                orchestrator.batch_size = args.batch_size
            scheduler = Scheduler(build_sync_engine(repository), orchestrator)
            scheduler.start()
            scheduler.wait()

        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        return 1

    finally:
        if scheduler is not None:
            scheduler.stop(timeout=5)


if __name__ == "__main__":
    sys.exit(main())
