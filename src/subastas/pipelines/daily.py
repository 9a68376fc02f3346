"""
Daily task: Discovery -> Enrichment -> Geocoding -> Export.

Each stage runs to completion before the next one starts and commits its
own progress, so an interrupted run is picked up by the next invocation.

Usage:
    python -m src.subastas.pipelines.daily
    python -m src.subastas.pipelines.daily --stages enrichment geocoding --enrichment-limit 20
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from src.subastas.db.repository import AuctionRepository
from src.subastas.db.session import close_connections, create_all_tables, get_db_session
from src.subastas.pipelines.discovery import ListingDiscovery
from src.subastas.pipelines.enrichment import DetailEnrichment
from src.subastas.pipelines.export import SnapshotExporter
from src.subastas.pipelines.geocoding import AuctionGeocoding
from src.subastas.utils.logger import get_logger, setup_logging, stage_context

logger = get_logger(__name__)

STAGES = ["discovery", "enrichment", "geocoding", "export"]
RESETTABLE = ["enrichment", "geocode"]


def run_stages(
    session: Session,
    stages: Iterable[str] = STAGES,
    partitions: Optional[List[str]] = None,
    enrichment_limit: Optional[int] = None,
    export_limit: Optional[int] = None,
    export_path: Optional[Path] = None,
) -> Dict[str, object]:
    """
    Run the selected stages in pipeline order.

    Returns:
        Mapping of stage name to that stage's result
    """
    selected = set(stages)
    unknown = selected - set(STAGES)
    if unknown:
        raise ValueError(f"Unknown stage(s) {sorted(unknown)}. Valid options: {', '.join(STAGES)}")

    runners = {
        "discovery": lambda: ListingDiscovery(session).run(partitions),
        "enrichment": lambda: DetailEnrichment(session).run(limit=enrichment_limit),
        "geocoding": lambda: AuctionGeocoding(session).run(),
        "export": lambda: SnapshotExporter(session, output_path=export_path).run(limit=export_limit),
    }

    results: Dict[str, object] = {}
    for stage in STAGES:
        if stage not in selected:
            continue
        with stage_context(stage):
            logger.info("stage_started")
            results[stage] = runners[stage]()

    logger.info(
        "stages_complete",
        stages=[stage for stage in STAGES if stage in selected],
        backlog=AuctionRepository().count_incomplete(session),
    )
    return results


def reset_queue(session: Session, queue: str) -> int:
    """Put every auction back on the enrichment or geocode queue."""
    repository = AuctionRepository()
    if queue == "enrichment":
        count = repository.reset_enrichment(session)
    elif queue == "geocode":
        count = repository.reset_geocode(session)
    else:
        raise ValueError(f"Unknown queue '{queue}'. Valid options: {', '.join(RESETTABLE)}")
    session.commit()
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="BOE real-estate auction ingestion pipeline")
    parser.add_argument(
        "--stages",
        nargs="+",
        choices=STAGES,
        default=STAGES,
        help="Stages to run (always executed in pipeline order)",
    )
    parser.add_argument(
        "--partitions",
        nargs="+",
        default=None,
        help="Province codes to search (default: all 52)",
    )
    parser.add_argument("--enrichment-limit", type=int, default=None, help="Auctions to enrich this run")
    parser.add_argument("--export-limit", type=int, default=None, help="Auctions in the snapshot")
    parser.add_argument("--export-path", type=Path, default=None, help="Snapshot file to write")
    parser.add_argument(
        "--reset",
        choices=RESETTABLE,
        default=None,
        help="Put every auction back on a work queue before running",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit status."""
    args = parse_args(argv)
    setup_logging()
    logger.info("daily_task_started", stages=args.stages)

    try:
        create_all_tables()
        with get_db_session() as session:
            if args.reset:
                count = reset_queue(session, args.reset)
                logger.info("queue_reset", queue=args.reset, count=count)

            run_stages(
                session,
                stages=args.stages,
                partitions=args.partitions,
                enrichment_limit=args.enrichment_limit,
                export_limit=args.export_limit,
                export_path=args.export_path,
            )
    except Exception as e:
        logger.error("daily_task_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        return 1
    finally:
        close_connections()

    logger.info("daily_task_completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
