"""
tapevm: Logging Setup

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are installed here, by the CLI or by an embedding application.

Console output goes through rich's RichHandler on stderr so it never
mixes with program output on stdout. An optional log file captures
everything at DEBUG with the pipe-separated format.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = "tapevm",
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure and return the ``name`` logger.

    Calling it again for a logger that already has handlers returns the
    logger untouched, unless ``force`` is set: then the existing handlers
    are closed and removed and the new settings are installed.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        if not force:
            return logger
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)

    # ── Console handler: stderr, WARNING+ by default ──
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    ch.setLevel(console_level)
    logger.addHandler(ch)

    # ── File handler: captures everything (DEBUG+) ──
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(fh)
        logger.info("Logger initialized: %s -> %s", name, log_file)

    return logger
