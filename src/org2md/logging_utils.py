#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/logging_utils.py
"""Logging setup shared by the org2md command line and embedding hosts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "org2md"


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    quiet: bool = False,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the org2md logger.

    Only the package logger is configured so a host application keeps
    control of its own root logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO").
    log_file : str, optional
        Also append log records to this file.
    trace_mode : bool, default False
        Include timestamps and logger names, for tracing an export.
    quiet : bool, default False
        Drop the console handler; only the log file (if any) receives records.

    Returns
    -------
    logging.Logger
        The configured ``org2md`` logger.

    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = logging.getLevelName(str(log_level).upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if trace_mode:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug("Logging to file: %s", log_file)

    return logger
