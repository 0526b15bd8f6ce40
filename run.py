"""
Graduate Harvester — job posting ingestion pipeline.
CLI entry point for running pipeline stages once or on a schedule.
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from config.settings import settings
from graph.workflow import RUN_ALL, run_forever, run_pipeline
from models.config import ScrapeQuery
from models.state import PipelineContext, PipelineState
from tools.file_handler import generate_summary, load_sources_config
from tools.job_store import SCHEMA_SQL, get_all_jobs, get_job_count, init_db


def build_context(args: argparse.Namespace) -> PipelineContext:
    """Apply CLI overrides to settings and load the sources config."""
    if args.db:
        settings.db_path = args.db
    if args.export_dir:
        settings.export_dir = args.export_dir
    if args.engine:
        settings.browser_engine = args.engine

    sources = load_sources_config(args.config or settings.sources_config)

    # CLI flag > environment > sources.yaml; the merged query is validated again
    overrides = {
        "keywords": args.keywords or settings.scrape_keywords,
        "location": args.location or settings.scrape_location,
        "max_results": args.max_results if args.max_results is not None else settings.scrape_max_jobs,
    }
    overrides = {k: v for k, v in overrides.items() if v not in (None, "")}
    query = ScrapeQuery(**{**sources.query.model_dump(), **overrides})

    return PipelineContext(settings=settings, sources=sources, query=query)


def print_state(state: PipelineState) -> None:
    for result in state.get("results", []):
        stage = result.get("stage")
        details = ", ".join(f"{k}={v}" for k, v in result.items() if k != "stage")
        print(f"  ✅ {stage}: {details}")
    for error in state.get("errors", []):
        print(f"  ⚠️  {error}")


def cmd_init_db(args: argparse.Namespace) -> int:
    db_path = init_db(args.db or settings.db_path)
    print(f"Database ready at: {db_path}")
    print("\n--- SQL SCHEMA ---")
    print(SCHEMA_SQL)
    print("------------------\n")
    return 0


def cmd_stage(args: argparse.Namespace) -> int:
    context = build_context(args)
    init_db(context.db_path)

    stages = RUN_ALL if args.command == "run-all" else [args.command]
    if args.command == "run-all":
        print("Running full pipeline...")

    state = run_pipeline(context, stages)
    print_state(state)

    if args.command in ("run-all", "export"):
        print(f"\n{generate_summary(get_all_jobs(context.db_path))}")
    return 1 if state.get("errors") else 0


def cmd_schedule(args: argparse.Namespace) -> int:
    context = build_context(args)
    init_db(context.db_path)
    stages = args.stages or RUN_ALL

    if args.run_now:
        print("🔧 Running pipeline immediately (--run-now)")
        state = run_pipeline(context, stages)
        print_state(state)
        return 1 if state.get("errors") else 0

    interval = args.interval or settings.schedule_minutes
    print(f"📦 Job store initialized: {get_job_count(context.db_path)} stored jobs")
    print(f"⏰ Starting scheduler — running every {interval} minutes")
    print(f"   Press Ctrl+C to stop.\n")

    def report(cycle: int, state: PipelineState) -> None:
        print(f"\n{'─' * 60}\n  Cycle #{cycle}\n{'─' * 60}")
        print_state(state)

    try:
        run_forever(context, interval, stages, on_cycle=report)
    except KeyboardInterrupt:
        print("\n\n⛔ Scheduler stopped.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="Path to sources.yaml")
    common.add_argument("--db", type=str, default=None, help=f"SQLite database path (default: {settings.db_path})")
    common.add_argument("--export-dir", type=str, default=None, help=f"Export directory (default: {settings.export_dir})")
    common.add_argument("--engine", choices=["playwright", "http"], default=None, help="Browser engine")
    common.add_argument("--keywords", type=str, default=None, help="Search keywords for board connectors")
    common.add_argument("--location", type=str, default=None, help="Search location for board connectors")
    common.add_argument("--max-results", type=int, default=None, help="Maximum postings per connector run")

    parser = argparse.ArgumentParser(
        prog="graduate-harvester",
        description="Harvest graduate jobs from job boards and top employers' career pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py init-db
  python run.py run-all
  python run.py scrape-boards --keywords "data analyst" --max-results 50
  python run.py schedule --interval 360
  python run.py schedule --run-now
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", parents=[common], help="Create the database and print its schema")
    sub.add_parser("fetch-employers", parents=[common], help="Scrape employers from ranking lists")
    sub.add_parser("discover-urls", parents=[common], help="Discover careers URLs for employers")
    sub.add_parser("scrape-jobs", parents=[common], help="Harvest jobs from employers with careers URLs")
    sub.add_parser("scrape-boards", parents=[common], help="Run the configured job-board and API connectors")
    sub.add_parser("export", parents=[common], help="Export jobs to Excel/CSV")
    sub.add_parser("run-all", parents=[common], help="Run the full pipeline")

    schedule = sub.add_parser("schedule", parents=[common], help="Run the pipeline on a fixed interval")
    schedule.add_argument("--interval", type=float, default=None, metavar="MINUTES",
                          help=f"Minutes between runs (default: {settings.schedule_minutes})")
    schedule.add_argument("--run-now", action="store_true", help="Run once immediately and exit")
    schedule.add_argument("--stages", nargs="+", choices=RUN_ALL, default=None,
                          help="Stages to run each cycle (default: all)")

    return parser


def main(argv: list[str] = None) -> int:
    """Main entry point for the harvester CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        if args.command == "init-db":
            return cmd_init_db(args)
        if args.command == "schedule":
            return cmd_schedule(args)
        return cmd_stage(args)
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e}")
        return 2
    except KeyboardInterrupt:
        print("\n\n⛔ Interrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
