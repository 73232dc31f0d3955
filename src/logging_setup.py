"""
logging_setup.py
================
Configures the root logger with a console handler and, optionally, a
rotating file handler (1 MB, 2 backups).

Call :func:`setup_logging` once at startup, before the first step runs.
"""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """Apply a unified log format to console and file output.

    Parameters
    ----------
    level : int or str
        Minimum severity level (e.g. ``logging.DEBUG`` or ``"DEBUG"``).
        ``DEBUG`` traces every scheduler decision and departure.
    log_file : str, optional
        Path of an additional rotating log file.
    """
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        fh.setFormatter(fmt)
        root.addHandler(fh)
