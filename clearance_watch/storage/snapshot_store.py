# clearance_watch/storage/snapshot_store.py

"""JSON persistence of the baseline snapshot."""

import json
import logging
from typing import Any, cast

from clearance_watch.errors import StorageError
from clearance_watch.models.record import Record
from clearance_watch.storage.blob_store import BlobStore

logger = logging.getLogger("clearance_watch.storage")


def dump_records(records: list[Record]) -> bytes:
    """Serialise records to the JSON array wire format."""
    return json.dumps(
        [r.to_dict() for r in records], ensure_ascii=False
    ).encode("utf-8")


def parse_records(raw: bytes, key: str = "") -> list[Record]:
    """Decode a JSON array of records, raising StorageError on bad data."""
    try:
        data: Any = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StorageError(
            f"Snapshot is not valid JSON: {exc}", key=key
        ) from exc

    if not isinstance(data, list):
        raise StorageError("Snapshot is not a JSON array", key=key)

    rows = cast(list[Any], data)
    records: list[Record] = []
    for idx, row in enumerate(rows):
        if not isinstance(row, dict):
            raise StorageError(
                f"Snapshot entry {idx} is not an object", key=key
            )
        try:
            records.append(Record.from_dict(cast(dict[str, Any], row)))
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(
                f"Snapshot entry {idx} is malformed: {exc!r}", key=key
            ) from exc
    return records


class SnapshotStore:
    """Loads and saves one snapshot under a fixed blob key."""

    def __init__(self, blob_store: BlobStore, key: str) -> None:
        self.blob_store = blob_store
        self.key = key

    def load(self) -> list[Record]:
        """Return the persisted snapshot.

        Raises ``NotFound`` when nothing has been persisted yet and
        ``StorageError`` when the blob is unreadable or corrupt.
        """
        records = parse_records(self.blob_store.load(self.key), self.key)
        logger.info(
            "Loaded snapshot '%s' with %d records", self.key, len(records)
        )
        return records

    def save(self, records: list[Record]) -> None:
        """Replace the persisted snapshot with *records*."""
        self.blob_store.save(self.key, dump_records(records))
        logger.info(
            "Persisted snapshot '%s' with %d records",
            self.key,
            len(records),
        )
