"""
Diagnostics for the rigid_transformation package.

The console report is printed by the pipeline; this logger carries what
sits around it: degenerate-correspondence warnings from the estimator,
load/export paths, vertex counts, export failure tracebacks (DEBUG) and
the RMS residual of each alignment.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "rigid_transformation"


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> None:
    """
    Attach console (and optionally file) handlers to the package logger.

    At WARNING only degenerate alignments show up; INFO adds export paths
    and residuals, DEBUG adds the applied random rotation and the reason
    behind each failed export.

    Args:
        level: Logging level for the package logger and its handlers.
        log_file: Optional path that receives the same records, truncated
            on every call.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Repeated runs in one process reuse the logger
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", log_file or "stdout")
