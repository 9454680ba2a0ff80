# clearance_watch/notify/console_notifier.py

"""Terminal notifier that prints differences as a Rich table."""

import logging

from rich.console import Console
from rich.table import Table

from clearance_watch.models.record import Record
from clearance_watch.notify.formatters import format_price

logger = logging.getLogger("clearance_watch.notify")


def build_differences_table(
    records: list[Record], title: str = "Clearance Changes",
) -> Table:
    """Build a Rich table of records in their given order."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Item", max_width=60)
    table.add_column("ID", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Prev", justify="right")
    table.add_column("Orig", justify="right", style="dim")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, r in enumerate(records, 1):
        table.add_row(
            str(idx),
            r.name[:60],
            r.item_id,
            format_price(r.price),
            format_price(r.old_price),
            format_price(r.original_price),
            r.url,
        )
    return table


class ConsoleNotifier:
    """Print differences to stderr instead of sending them anywhere."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def notify(self, differences: list[Record]) -> None:
        self.console.print(build_differences_table(differences))
        logger.info("Printed %d differences to console", len(differences))
