"""Logging utilities for formfoundry.

Provides plain-text and structured JSON output, plus a logger wrapper that
tags every record with the form it belongs to.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = [
    "setup_logging",
    "JSONFormatter",
    "FormLogger",
    "get_form_logger",
]

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record.

    The form a record belongs to is a top-level key; any other ``extra=``
    attributes are grouped under "extra".

    Example output:
        {"timestamp": "2025-01-15T10:30:00.123Z", "level": "INFO",
         "logger": "formfoundry.controller", "message": "Submission accepted",
         "form": "event_registration"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        form = extra.pop("form", None)
        if form is not None:
            log_data["form"] = form
        if extra:
            log_data["extra"] = extra
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class FormLogger:
    """Logger wrapper that carries form context.

    Example:
        logger = get_form_logger(__name__, form="job_application")
        logger.info("Submission rejected")  # record.form == "job_application"
    """

    def __init__(self, name: str, **context: Any):
        self._logger = logging.getLogger(name)
        self._context: Dict[str, Any] = dict(context)

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        extra = {**kwargs.pop("extra", {}), **self._context}
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)


def get_form_logger(name: str, **context: Any) -> FormLogger:
    """Get a logger whose records carry context such as form="event_registration"."""
    return FormLogger(name, **context)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure the root logger for the command line.

    Args:
        verbose: Log at DEBUG instead of WARNING
        json_format: One JSON object per line instead of plain text
        log_file: Optional file that receives the same records
    """
    level = logging.DEBUG if verbose else logging.WARNING
    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    # stderr keeps log lines out of form output on stdout
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
