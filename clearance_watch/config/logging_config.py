# clearance_watch/config/logging_config.py

"""Per-process timestamped logging configuration for clearance_watch.

Each process gets one log file inside ``Settings.LOGS_DIR``, named with
its launch timestamp (e.g. ``logs/run_20260214_153045.log``).  A
one-shot ``run`` or ``mute`` therefore logs to its own file, while a
``watch`` loop or the ``serve`` API process appends every cycle and
request to the single file opened at start-up.

Error records carry module, function and line number so a failed
stage can be traced back from the log alone.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from clearance_watch.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _active_log_file(root_logger: logging.Logger) -> Path | None:
    """Return the file already attached to *root_logger*, if any."""
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging() -> Path:
    """Initialise the root ``clearance_watch`` logger for this process.

    Calling it again is harmless: no handlers are added and the path
    of the file opened by the first call is returned.

    Returns:
        The :class:`~pathlib.Path` to the log file for this process.
    """
    root_logger = logging.getLogger("clearance_watch")
    root_logger.setLevel(logging.DEBUG)

    existing = _active_log_file(root_logger)
    if existing is not None:
        return existing

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
