"""Logging helpers for the package."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


_DEFAULT_LOG = Path.home() / ".switch_scan.log"


def setup(level: int | str = logging.INFO, log_file: str | Path | None = None) -> None:
    """Configure logging for the package.

    Parameters
    ----------
    level:
        Minimum severity level for log messages, as a number or a name
        such as ``"DEBUG"``.
    log_file:
        Optional path to the log file.  If not provided,
        ``~/.switch_scan.log`` is used.
    """

    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level {name!r}")

    log_file = _DEFAULT_LOG if log_file is None else Path(log_file)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    try:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError:
        # console-only if the file can't be opened
        pass

    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )

    def _excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).critical(
            "Unhandled exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _excepthook
