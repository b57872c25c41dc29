"""Console logging for e2e runs.

Conventions:
- Progress goes to INFO as ``[<UTC timestamp>] message``
- Non-fatal problems go to WARNING as ``[WARN] message``
- Fatal problems go to ERROR as ``[ERROR] message`` in red
- Everything is written to stderr; stdout belongs to the child tools

Usage:
    from e2erun.logging import setup_logging, timed_operation

    setup_logging(verbose=True)
    with timed_operation(logger, "fetch"):
        ...
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional, TextIO


ROOT_LOGGER = "e2erun"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Run ID shared by every log line of one invocation
_run_id: str = ""


def new_run_id() -> str:
    """Generate a new run ID for this invocation."""
    global _run_id
    _run_id = uuid.uuid4().hex[:8]
    return _run_id


def get_run_id() -> str:
    return _run_id or "no-run"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Short name (e.g., "runner", "cli") or a dotted module name.

    Returns:
        Logger named ``e2erun.<name>``; handlers live on the package logger.
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class HumanFormatter(logging.Formatter):
    """Formatter for human-readable output."""

    converter = time.gmtime

    RED = "\033[0;31m"
    GRAY = "\033[90m"
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if record.exc_info and record.levelno >= logging.ERROR:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        if record.levelno >= logging.ERROR:
            return f"{self.RED}[ERROR] {msg}{self.RESET}"
        if record.levelno >= logging.WARNING:
            return f"[WARN] {msg}"

        line = f"[{self.formatTime(record, TIMESTAMP_FORMAT)}] {msg}"
        elapsed_ms = getattr(record, "elapsed_ms", None)
        if elapsed_ms is not None:
            line = f"{line} ({elapsed_ms} ms)"
        if record.levelno < logging.INFO:
            return f"{self.GRAY}{line}{self.RESET}"
        return line


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured JSON log lines."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "run_id": get_run_id(),
        }
        for key in ("phase", "elapsed_ms", "error", "suite"):
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val
        return json.dumps(entry)


def setup_logging(
    verbose: bool = False,
    structured: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Enable DEBUG output
        structured: Emit JSON lines instead of human-readable text
        stream: Output stream (stderr by default)

    Returns:
        The configured root package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter() if structured else HumanFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger


@contextmanager
def timed_operation(
    logger: logging.Logger,
    operation: str,
    **extra: Any,
) -> Generator[dict[str, Any], None, None]:
    """Context manager that logs timing for a run phase.

    Args:
        logger: Logger instance.
        operation: Name of the phase.
        **extra: Additional fields to log.
    """
    ctx: dict[str, Any] = {}
    start = time.monotonic()
    logger.debug(f"Starting {operation}", extra={"phase": f"{operation}:start", **extra})
    try:
        yield ctx
        elapsed_ms = round((time.monotonic() - start) * 1000)
        logger.debug(
            f"Completed {operation}",
            extra={"phase": f"{operation}:done", "elapsed_ms": elapsed_ms, **ctx, **extra},
        )
    except Exception as e:
        elapsed_ms = round((time.monotonic() - start) * 1000)
        logger.debug(
            f"Failed {operation}: {e}",
            extra={"phase": f"{operation}:error", "elapsed_ms": elapsed_ms, "error": str(e), **extra},
        )
        raise
