# clearance_watch/models/record.py

"""Catalog record model shared by snapshots and differences."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    """Convert a datetime to integer milliseconds since the epoch."""
    return round(moment.timestamp() * 1000)


def from_epoch_millis(millis: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=millis)


@dataclass
class Record:
    """One catalog item, either observed or stored in the baseline.

    ``name`` is the matching key between snapshots.  ``item_id`` is the
    source catalog id and is only used for mute lookups and ignore
    links.  ``old_price`` is set on emitted differences only.
    """

    name: str
    item_id: str
    price: float
    original_price: float = 0.0
    image: str = ""
    url: str = ""
    old_price: float | None = None
    change_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase wire format."""
        data: dict[str, Any] = {
            "name": self.name,
            "id": self.item_id,
            "price": self.price,
        }
        if self.old_price is not None:
            data["oldPrice"] = self.old_price
        data["originalPrice"] = self.original_price
        data["image"] = self.image
        data["url"] = self.url
        if self.change_timestamp is not None:
            data["changeTimestamp"] = to_epoch_millis(
                self.change_timestamp
            )
        return data

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "Record":
        """Build a Record from its wire format.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` on
        malformed rows; callers map those to a storage failure.
        """
        old_price = row.get("oldPrice")
        millis = row.get("changeTimestamp")
        return cls(
            name=str(row["name"]),
            item_id=str(row["id"]),
            price=float(row["price"]),
            original_price=float(row.get("originalPrice") or 0.0),
            image=str(row.get("image") or ""),
            url=str(row.get("url") or ""),
            old_price=(
                float(old_price) if old_price is not None else None
            ),
            change_timestamp=(
                from_epoch_millis(millis) if millis is not None else None
            ),
        )
