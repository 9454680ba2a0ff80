# clearance_watch/cli/runner.py

"""Headless CLI commands built on the watch orchestrator."""

import json
import logging
import sys
import time
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from clearance_watch.errors import describe_error
from clearance_watch.models.record import Record
from clearance_watch.notify.console_notifier import build_differences_table
from clearance_watch.services.watch_orchestrator import (
    SETUP_STAGE,
    CycleResult,
    WatchOrchestrator,
    build_guarded,
)

logger = logging.getLogger("clearance_watch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

OrchestratorFactory = Callable[[], WatchOrchestrator]


def _print_error(message: str) -> None:
    """Print a failure line; *message* may hold scraped text."""
    _err.print(f"[red]{escape(message)}[/red]")


def _build(factory: OrchestratorFactory) -> WatchOrchestrator | None:
    """Build an orchestrator, reporting wiring failures to stderr."""
    orchestrator, error = build_guarded(factory)
    if orchestrator is None:
        _print_error(CycleResult(stage=SETUP_STAGE, error=error).message)
    return orchestrator


def _print_table(records: list[Record], title: str) -> None:
    """Render a Rich table of records to stdout."""
    Console().print(build_differences_table(records, title=title))


def _report_cycle(result: CycleResult, output_format: str) -> int:
    """Write a cycle outcome to stdout/stderr and return an exit code."""
    if not result.ok:
        _print_error(result.message)
        return 1

    count = len(result.differences)
    if count:
        _err.print(f"[green]✓ {count} change(s) detected[/green]")
    else:
        _err.print("[dim]No changes detected.[/dim]")

    if output_format == "table":
        _print_table(result.differences, "Clearance Changes")
    else:
        json.dump(
            result.differences_as_dicts(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


def run_once(
    output_format: str = "json",
    factory: OrchestratorFactory = WatchOrchestrator.from_settings,
) -> int:
    """Run a single cycle and return an exit code (0=ok, 1=fail)."""
    orchestrator = _build(factory)
    if orchestrator is None:
        return 1
    _err.print(f"[bold]Checking:[/bold] {escape(orchestrator.source_url)}")
    result = orchestrator.run_cycle()
    return _report_cycle(result, output_format)


def run_mute(
    item_id: str,
    factory: OrchestratorFactory = WatchOrchestrator.from_settings,
) -> int:
    """Mute an item id and report whether it was new."""
    orchestrator = _build(factory)
    if orchestrator is None:
        return 1
    result = orchestrator.mute(item_id)
    if not result.ok:
        _print_error(result.message)
        return 1
    style = "yellow" if result.already_muted else "green"
    _err.print(f"[{style}]{escape(result.message)}[/{style}]")
    return 0


def run_watch(
    interval_minutes: int,
    max_cycles: int | None = None,
    factory: OrchestratorFactory = WatchOrchestrator.from_settings,
) -> int:
    """Run cycles on a fixed interval until interrupted.

    Each cycle gets a freshly built orchestrator so that no state
    survives between runs except what is persisted.  A failed cycle,
    including one whose orchestrator could not be built, is reported
    and the loop carries on.
    """
    interval_seconds = max(interval_minutes, 1) * 60
    _err.print(
        f"[bold]Watching every {interval_minutes} min[/bold] "
        "[dim](Ctrl+C to stop)[/dim]"
    )
    cycles = 0
    failures = 0
    try:
        while max_cycles is None or cycles < max_cycles:
            if cycles:
                time.sleep(interval_seconds)
            cycles += 1
            orchestrator, error = build_guarded(factory)
            if orchestrator is None:
                result = CycleResult(stage=SETUP_STAGE, error=error)
            else:
                result = orchestrator.run_cycle()
            if result.ok:
                logger.info(
                    "Cycle %d finished with %d differences",
                    cycles,
                    len(result.differences),
                )
                if result.differences:
                    _err.print(
                        f"[green]Cycle {cycles}: "
                        f"{len(result.differences)} change(s)[/green]"
                    )
            else:
                failures += 1
                logger.warning("Cycle %d failed: %s", cycles, result.message)
                _print_error(f"Cycle {cycles}: {result.message}")
    except KeyboardInterrupt:
        logger.info("Watch loop interrupted after %d cycles", cycles)
        _err.print("[dim]Stopped.[/dim]")

    return 1 if cycles and failures == cycles else 0


def run_show_baseline(
    factory: OrchestratorFactory = WatchOrchestrator.from_settings,
) -> int:
    """Print the persisted baseline as a table."""
    orchestrator = _build(factory)
    if orchestrator is None:
        return 1
    try:
        baseline = orchestrator.load_baseline()
    except Exception as exc:
        logger.error("Baseline load failed: %s", exc, exc_info=True)
        _print_error(f"Error in load-baseline: {describe_error(exc)}")
        return 1

    if not baseline:
        _err.print("[yellow]No baseline persisted yet.[/yellow]")
        return 0
    _print_table(baseline, f"Baseline ({len(baseline)} items)")
    return 0
