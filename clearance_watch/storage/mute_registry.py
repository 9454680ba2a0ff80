# clearance_watch/storage/mute_registry.py

"""Persistent set of muted (snoozed) catalog item ids."""

import json
import logging
from typing import Any, cast

from clearance_watch.errors import NotFound, StorageError
from clearance_watch.storage.blob_store import BlobStore

logger = logging.getLogger("clearance_watch.mutes")


def _normalise_id(item_id: object) -> str:
    """Ids compare by value: ``2`` and ``"2"`` are the same item."""
    return str(item_id).strip()


class MuteRegistry:
    """Ordered, append-only registry of muted item ids.

    The registry is loaded fresh for every operation; there is no
    caching across invocations.  ``add`` writes through to storage
    immediately.  Mutes are permanent, so there is no removal.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        key: str,
        ids: list[str] | None = None,
    ) -> None:
        self.blob_store = blob_store
        self.key = key
        self._ids: list[str] = list(ids or [])
        self._lookup: set[str] = set(self._ids)

    @classmethod
    def load(cls, blob_store: BlobStore, key: str) -> "MuteRegistry":
        """Read the registry from storage.

        A key that has never been written yields an empty registry.
        Unreadable or corrupt data raises ``StorageError`` so that the
        caller fails instead of silently un-muting everything.
        """
        try:
            raw = blob_store.load(key)
        except NotFound:
            logger.info("No mute registry at '%s', starting empty", key)
            return cls(blob_store, key)

        try:
            data: Any = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError(
                f"Mute registry is not valid JSON: {exc}", key=key
            ) from exc
        if not isinstance(data, list):
            raise StorageError("Mute registry is not a JSON array", key=key)

        ids: list[str] = []
        for value in cast(list[Any], data):
            if isinstance(value, (dict, list)) or value is None:
                raise StorageError(
                    f"Mute registry holds a non-scalar id: {value!r}",
                    key=key,
                )
            ids.append(_normalise_id(value))

        logger.debug("Loaded %d muted ids from '%s'", len(ids), key)
        return cls(blob_store, key, ids)

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> list[str]:
        """Muted ids in the order they were added."""
        return list(self._ids)

    def contains(self, item_id: object) -> bool:
        """Return True if *item_id* is muted."""
        return _normalise_id(item_id) in self._lookup

    def add(self, item_id: object) -> bool:
        """Mute *item_id* and persist the registry.

        Returns ``True`` when the id was already muted, in which case
        nothing is written.
        """
        normalised = _normalise_id(item_id)
        if normalised in self._lookup:
            logger.info("Item %s was already muted", normalised)
            return True

        updated = self._ids + [normalised]
        self.blob_store.save(
            self.key, json.dumps(updated).encode("utf-8")
        )
        self._ids = updated
        self._lookup.add(normalised)
        logger.info(
            "Muted item %s (%d ids in registry)", normalised, len(updated)
        )
        return False
