# clearance_watch/detect/diff_engine.py

"""Snapshot comparison: new items and price drops."""

import logging
from dataclasses import replace

from clearance_watch.models.record import Record
from clearance_watch.storage.mute_registry import MuteRegistry

logger = logging.getLogger("clearance_watch.detect")


def find_by_name(records: list[Record], name: str) -> Record | None:
    """Return the first record whose name equals *name*."""
    for record in records:
        if record.name == name:
            return record
    return None


class DiffEngine:
    """Compare an observed snapshot against the baseline."""

    @staticmethod
    def compute_differences(
        baseline: list[Record],
        observed: list[Record],
        muted: MuteRegistry,
    ) -> list[Record]:
        """Return observed records that are new or cheaper than before.

        Records are matched by ``name`` (first match wins).  Muted ids
        never produce a difference.  A price drop is emitted as a copy
        carrying ``old_price``; observed records are left untouched.
        Output preserves the order of *observed*.
        """
        differences: list[Record] = []
        new_count = 0
        drop_count = 0
        muted_count = 0

        for current in observed:
            if muted.contains(current.item_id):
                muted_count += 1
                continue

            previous = find_by_name(baseline, current.name)
            if previous is None:
                differences.append(current)
                new_count += 1
            elif current.price < previous.price:
                differences.append(
                    replace(current, old_price=previous.price)
                )
                drop_count += 1

        logger.info(
            "Diff found %d new and %d price-dropped items "
            "(%d muted skipped, %d observed)",
            new_count,
            drop_count,
            muted_count,
            len(observed),
        )
        return differences
