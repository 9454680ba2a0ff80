# clearance_watch/notify/notifier.py

"""Notifier interface and registry."""

from typing import Protocol

from clearance_watch.errors import ConfigError
from clearance_watch.models.record import Record
from clearance_watch.notify.console_notifier import ConsoleNotifier
from clearance_watch.notify.email_notifier import EmailNotifier


class Notifier(Protocol):
    """Outbound channel for a batch of differences."""

    def notify(self, differences: list[Record]) -> None:
        """Deliver *differences*, raising NotifyError on failure."""
        ...


AVAILABLE_NOTIFIERS: tuple[str, ...] = ("email", "console")


def build_notifier(name: str) -> Notifier:
    """Instantiate the notifier registered under *name*."""
    key = name.strip().lower()
    if key == "email":
        return EmailNotifier.from_settings()
    if key == "console":
        return ConsoleNotifier()
    valid = ", ".join(AVAILABLE_NOTIFIERS)
    msg = f"Unknown notifier '{name}' (available: {valid})"
    raise ConfigError(msg)
