# main.py

"""Entry point for the clearance_watch monitor."""

import argparse
import logging
import sys

from clearance_watch.config.logging_config import setup_logging
from clearance_watch.config.settings import Settings

logger = logging.getLogger("clearance_watch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="clearance_watch",
        description=(
            "Watch a clearance catalog for new items and price drops."
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a single check cycle.")
    run.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    mute = sub.add_parser(
        "mute", help="Permanently ignore an item by its catalog id."
    )
    mute.add_argument("item_id", help="Catalog id of the item to mute.")

    watch = sub.add_parser(
        "watch", help="Run check cycles on a fixed interval."
    )
    watch.add_argument(
        "-i",
        "--interval",
        type=int,
        default=Settings.SCRAPE_INTERVAL_MINUTES,
        dest="interval_minutes",
        help=(
            "Minutes between cycles "
            f"(default: {Settings.SCRAPE_INTERVAL_MINUTES})."
        ),
    )

    sub.add_parser("baseline", help="Show the persisted baseline.")

    serve = sub.add_parser(
        "serve", help="Serve the run/mute HTTP endpoints."
    )
    serve.add_argument("--host", default=Settings.API_HOST)
    serve.add_argument("--port", type=int, default=Settings.API_PORT)
    return parser


def _run_serve(args: argparse.Namespace) -> None:
    """Launch the HTTP API under uvicorn."""
    import uvicorn

    from clearance_watch.api.app import create_app

    try:
        uvicorn.run(create_app(), host=args.host, port=args.port)
    except Exception:
        logger.critical("Fatal error in API server", exc_info=True)
        raise
    finally:
        logger.info("clearance_watch API shutting down")


def main() -> None:
    """Dispatch to the requested subcommand."""
    log_file = setup_logging()
    logger.info("clearance_watch starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from clearance_watch.cli import runner

    if args.command == "run":
        sys.exit(runner.run_once(args.output_format))
    elif args.command == "mute":
        sys.exit(runner.run_mute(args.item_id))
    elif args.command == "watch":
        sys.exit(runner.run_watch(args.interval_minutes))
    elif args.command == "baseline":
        sys.exit(runner.run_show_baseline())
    else:
        _run_serve(args)


if __name__ == "__main__":
    main()
