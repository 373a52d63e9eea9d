from __future__ import annotations

import logging
from pathlib import Path

LOG_FILE_NAME = "epictrack.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", *, log_file: Path | None = None) -> logging.Handler:
    """Attach one handler to the epictrack logger.

    Pages redraw the whole terminal, so records go to a file when one is given
    and to stderr otherwise. Calling this again replaces the previous handler.
    """
    package_logger = logging.getLogger("epictrack")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in package_logger.handlers[:]:
        package_logger.removeHandler(existing)
        existing.close()

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return handler
