# src/config/logging_config.py

"""Per-run logging for beauty_shop.

Every launch writes ``logs/run_<timestamp>.log`` with DEBUG detail and
mirrors warnings to stderr.  All ``beauty_shop.*`` loggers (store,
catalog, likes, cli, ui) propagate to the handlers installed here.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_ROOT_LOGGER = "beauty_shop"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    console_level: int = logging.WARNING,
    logs_dir: Path | None = None,
) -> Path:
    """Attach the file and console handlers to the ``beauty_shop`` logger.

    Args:
        console_level: Minimum level echoed to stderr.  The TUI keeps
            the default so log lines do not bleed into the screen.
        logs_dir: Override for ``Settings.LOGS_DIR``.

    Returns:
        The path of the log file for this run.  Repeated calls reuse the
        handlers from the first call.
    """
    directory = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = directory / f"run_{timestamp}.log"

    root_logger = logging.getLogger(_ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)

    # Tests call this repeatedly
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
