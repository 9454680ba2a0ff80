# clearance_watch/errors.py

"""Exception types raised by the clearance_watch collaborators."""

from typing import Optional


class ClearanceWatchError(Exception):
    """Base class for every failure the orchestrator reports."""

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        self.message = message
        self.key = key
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        context_parts: list[str] = []
        if self.key:
            context_parts.append(f"key={self.key}")
        if self.url:
            context_parts.append(f"url={self.url}")
        context = ", ".join(context_parts)
        return f"{self.message} ({context})" if context else self.message


class FetchError(ClearanceWatchError):
    """Raised when the catalog page is unreachable or unparseable."""


class StorageError(ClearanceWatchError):
    """Raised when a blob cannot be read, decoded or written."""


class NotFound(StorageError):
    """Raised when a blob key has never been written."""


class NotifyError(ClearanceWatchError):
    """Raised when the notification channel rejects a send."""


class ConfigError(ClearanceWatchError):
    """Raised when settings cannot be turned into working collaborators."""


def describe_error(exc: BaseException) -> str:
    """One-line description used in cycle and mute results."""
    if isinstance(exc, ClearanceWatchError):
        return str(exc)
    return f"unexpected {type(exc).__name__}: {exc}"
