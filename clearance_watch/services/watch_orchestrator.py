# clearance_watch/services/watch_orchestrator.py

"""Orchestrates one fetch → diff → notify → reconcile → persist cycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from clearance_watch.config.settings import Settings
from clearance_watch.detect.diff_engine import DiffEngine
from clearance_watch.detect.reconciler import Reconciler, utc_now
from clearance_watch.errors import (
    ClearanceWatchError,
    NotFound,
    describe_error,
)
from clearance_watch.models.record import Record
from clearance_watch.notify.notifier import Notifier, build_notifier
from clearance_watch.scrapers.microcenter_scraper import MicrocenterScraper
from clearance_watch.storage.blob_store import BlobStore, LocalBlobStore
from clearance_watch.storage.mute_registry import MuteRegistry
from clearance_watch.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("clearance_watch.orchestrator")

# Stage name reported when the collaborators cannot be built
SETUP_STAGE = "setup"


class Fetcher(Protocol):
    """Anything that turns a listing URL into observed records."""

    def fetch_observed(self, source_url: str) -> list[Record]:
        ...


@dataclass
class CycleResult:
    """Outcome of a single watch cycle.

    On success ``differences`` holds what was detected (possibly
    nothing).  On failure ``stage`` names the step that failed and
    ``error`` describes why.
    """

    differences: list[Record] = field(
        default_factory=lambda: list[Record]()
    )
    stage: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        """Short human-readable failure description."""
        if self.ok:
            return ""
        return f"Error in {self.stage}: {self.error}"

    def differences_as_dicts(self) -> list[dict[str, object]]:
        return [d.to_dict() for d in self.differences]


@dataclass
class MuteResult:
    """Outcome of a mute request."""

    item_id: str
    already_muted: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if not self.ok:
            return f"Error in mute: {self.error}"
        if self.already_muted:
            return f"item with id {self.item_id} had already been snoozed"
        return f"item with id {self.item_id} snoozed"


class WatchOrchestrator:
    """Wires the fetch, storage and notification collaborators.

    Every call is a self-contained unit of work: the baseline and the
    mute registry are re-read from storage each time and nothing is
    cached on the instance between calls.  Overlapping calls are not
    serialised; the last one to persist wins.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        snapshots: SnapshotStore,
        blob_store: BlobStore,
        mute_key: str,
        notifier: Notifier,
        source_url: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.fetcher = fetcher
        self.snapshots = snapshots
        self.blob_store = blob_store
        self.mute_key = mute_key
        self.notifier = notifier
        self.source_url = source_url
        self.clock = clock

    @classmethod
    def from_settings(cls) -> "WatchOrchestrator":
        """Build the production wiring from :class:`Settings`."""
        blob_store = LocalBlobStore(root=Settings.DATA_DIR)
        return cls(
            fetcher=MicrocenterScraper(),
            snapshots=SnapshotStore(blob_store, Settings.BASELINE_KEY),
            blob_store=blob_store,
            mute_key=Settings.MUTE_KEY,
            notifier=build_notifier(Settings.NOTIFIER),
            source_url=Settings.SOURCE_URL,
        )

    def load_baseline(self) -> list[Record]:
        """Return the persisted baseline (empty before the first run)."""
        try:
            return self.snapshots.load()
        except NotFound:
            logger.warning(
                "No baseline found; treating every observed item as new"
            )
            return []

    def run_cycle(self) -> CycleResult:
        """Detect, notify and persist changes for one snapshot.

        Notification happens before the baseline is touched: if it
        fails, nothing is persisted and the same differences are
        detected again next cycle.
        """
        stage = "load-baseline"
        try:
            baseline = self.load_baseline()

            stage = "fetch"
            observed = self.fetcher.fetch_observed(self.source_url)

            stage = "load-mutes"
            muted = MuteRegistry.load(self.blob_store, self.mute_key)

            stage = "diff"
            differences = DiffEngine.compute_differences(
                baseline, observed, muted
            )

            if differences:
                stage = "notify"
                self.notifier.notify(differences)

                stage = "reconcile"
                next_baseline = Reconciler.reconcile(
                    baseline, differences, self.clock
                )

                stage = "persist"
                self.snapshots.save(next_baseline)
            else:
                logger.info("No changes detected this cycle")

        except ClearanceWatchError as exc:
            logger.error(
                "Cycle failed during %s: %s", stage, exc, exc_info=True
            )
            return CycleResult(stage=stage, error=describe_error(exc))
        except Exception as exc:
            logger.critical(
                "Unexpected error during %s", stage, exc_info=True
            )
            return CycleResult(stage=stage, error=describe_error(exc))

        return CycleResult(differences=differences)

    def mute(self, item_id: str) -> MuteResult:
        """Permanently suppress *item_id* from future differences."""
        try:
            registry = MuteRegistry.load(self.blob_store, self.mute_key)
            already = registry.add(item_id)
        except ClearanceWatchError as exc:
            logger.error(
                "Mute of %s failed: %s", item_id, exc, exc_info=True
            )
            return MuteResult(item_id=item_id, error=describe_error(exc))
        except Exception as exc:
            logger.critical(
                "Unexpected error muting %s", item_id, exc_info=True
            )
            return MuteResult(item_id=item_id, error=describe_error(exc))
        return MuteResult(item_id=item_id, already_muted=already)


def build_guarded(
    factory: Callable[[], WatchOrchestrator],
) -> tuple[WatchOrchestrator | None, str | None]:
    """Call *factory*, returning ``(orchestrator, None)`` or ``(None, error)``.

    Wiring failures, such as an unknown notifier name, are reported
    like any other stage failure instead of escaping to the caller.
    """
    try:
        return factory(), None
    except Exception as exc:
        logger.error(
            "Failed during %s: %s", SETUP_STAGE, exc, exc_info=True
        )
        return None, describe_error(exc)
