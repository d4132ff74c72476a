"""Logging setup that tags records with the asset and step being processed.

Records carry two extra fields, ``asset`` (file name of the source being
processed) and ``phase`` (read, normalize, decode, extract), taken from a
``LogContext`` held in a context variable:

    2026-10-19 12:00:00,000 ERROR [Forest.asset|read] run_extract: failed to read file: ...
"""

from __future__ import annotations

import contextvars
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s [%(asset)s|%(phase)s] %(name)s: %(message)s"

UNSET = "-"


@dataclass(frozen=True)
class LogContext:
    """Asset and processing phase attached to log records."""

    source: str = ""
    phase: str = ""

    @property
    def asset(self) -> str:
        return os.path.basename(self.source) if self.source else UNSET


_CONTEXT: contextvars.ContextVar[LogContext] = contextvars.ContextVar(
    "asset_log_context", default=LogContext()
)


def current_log_context() -> LogContext:
    return _CONTEXT.get()


@contextmanager
def log_context(source: Optional[str] = None, phase: Optional[str] = None) -> Iterator[LogContext]:
    """Set the source and/or phase for logs emitted inside the block.

    Fields left as None keep their enclosing value.
    """
    changes = {}
    if source is not None:
        changes["source"] = source
    if phase is not None:
        changes["phase"] = phase
    context = replace(_CONTEXT.get(), **changes)
    token = _CONTEXT.set(context)
    try:
        yield context
    finally:
        _CONTEXT.reset(token)


class AssetContextFilter(logging.Filter):
    """Copy the current ``LogContext`` onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _CONTEXT.get()
        record.asset = context.asset
        record.phase = context.phase or UNSET
        return True


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Handler:
    """Install a stderr (or ``stream``) handler on the root logger.

    Calling again replaces the handler installed by the previous call, so
    entry points can be run repeatedly in one process.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_asset_context_handler", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(AssetContextFilter())
    handler._asset_context_handler = True
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler
