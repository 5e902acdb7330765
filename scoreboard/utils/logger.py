"""
Logging infrastructure for the standings tooling.

The engine modules only ever call ``logging.getLogger(__name__)``; handlers and
formatting are installed once by whatever process hosts the engine (the CLI, a
test, the surrounding application) through ``configure_global_logging``.
"""

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"
PHASE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | {phase} | %(filename)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S,%f"


class MillisecondsFormatter(logging.Formatter):
    """Formatter that includes milliseconds and aligns log levels."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - must match parent class method name
        """Override formatTime to include milliseconds."""
        ct = datetime.fromtimestamp(record.created)
        if datefmt and "%f" in datefmt:
            s = ct.strftime(datefmt.replace(",%f", ""))
            return s + f",{int(record.msecs):03d}"
        elif datefmt:
            return ct.strftime(datefmt)
        else:
            return ct.strftime("%Y-%m-%d %H:%M:%S") + f",{int(record.msecs):03d}"


def build_formatter(phase: Optional[str] = None) -> MillisecondsFormatter:
    """Build the pipe-delimited formatter, optionally tagged with a phase name."""
    fmt_str = PHASE_LOG_FORMAT.format(phase=phase) if phase else LOG_FORMAT
    return MillisecondsFormatter(fmt_str, datefmt=DATE_FORMAT)


def configure_global_logging(log_level: str = "INFO", phase: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger with the unified format.

    Call this early in application startup. Calling it again replaces the
    previous handler rather than stacking a second one.

    Args:
        log_level: Logging level to apply globally (DEBUG, INFO, WARNING, ERROR)
        phase: Optional phase name shown in every line (e.g., "standings")

    Returns:
        The configured root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    root_handler = logging.StreamHandler(sys.stdout)
    root_handler.setLevel(level)
    root_handler.setFormatter(build_formatter(phase))
    root_logger.addHandler(root_handler)

    # Keep markdown/terminal rendering libraries quiet below WARNING
    for lib_name in ["markdown_it", "rich"]:
        logging.getLogger(lib_name).setLevel(max(level, logging.WARNING))

    return root_logger


@contextmanager
def log_duration(logger: logging.Logger, operation: str, **fields):
    """
    Context manager to time an operation and log its outcome.

    Usage:
        with log_duration(logger, "standings computation", contestants=120):
            standings = compute_competition_standings(snapshot)
    """
    details = " ".join(f"{k}={v}" for k, v in fields.items())
    suffix = f" [{details}]" if details else ""
    start = time.perf_counter()
    logger.debug(f"Starting {operation}{suffix}")
    try:
        yield
    except Exception:
        duration = time.perf_counter() - start
        logger.error(f"Failed {operation} after {duration:.3f}s{suffix}")
        raise
    duration = time.perf_counter() - start
    logger.info(f"Completed {operation} in {duration:.3f}s{suffix}")
