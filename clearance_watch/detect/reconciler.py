# clearance_watch/detect/reconciler.py

"""Fold detected differences back into the baseline."""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from clearance_watch.detect.diff_engine import find_by_name
from clearance_watch.models.record import Record

logger = logging.getLogger("clearance_watch.detect")


def utc_now() -> datetime:
    """Wall-clock time used for change timestamps."""
    return datetime.now(timezone.utc)


class Reconciler:
    """Produce the next baseline from the current one and a diff."""

    @staticmethod
    def reconcile(
        baseline: list[Record],
        differences: list[Record],
        clock: Callable[[], datetime] = utc_now,
    ) -> list[Record]:
        """Apply *differences* to a copy of *baseline* in order.

        Each step sees the effect of the previous ones, so two
        differences sharing a name collapse onto one baseline entry.
        Unknown names are appended with a fresh change timestamp;
        lower prices update the matched entry.  Anything else is a
        no-op.  Baseline entries absent from the diff are kept as-is.
        """
        working = [replace(r) for r in baseline]
        added = 0
        lowered = 0

        for diff in differences:
            existing = find_by_name(working, diff.name)
            if existing is None:
                working.append(
                    replace(
                        diff,
                        old_price=None,
                        change_timestamp=clock(),
                    )
                )
                added += 1
            elif diff.price < existing.price:
                existing.price = diff.price
                now = clock()
                if (
                    existing.change_timestamp is None
                    or now > existing.change_timestamp
                ):
                    existing.change_timestamp = now
                lowered += 1

        logger.info(
            "Reconciled baseline: %d added, %d price updates, %d total",
            added,
            lowered,
            len(working),
        )
        return working
