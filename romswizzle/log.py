"""
Logging integration for the romswizzle command line.

Library modules log through ``logging.getLogger(__name__)``; this module
sends those records to stderr with the short prefixes the tool has always
used:

    warning: non-power-of-two input size (3 bytes)
    error: expected 8 data bits, but 7 were specified
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

_PREFIXES = {
    logging.DEBUG: "debug: ",
    logging.WARNING: "warning: ",
    logging.ERROR: "error: ",
    logging.CRITICAL: "error: ",
}


class DiagnosticHandler(logging.Handler):
    """Logging handler that writes prefixed diagnostics to a stream."""

    def __init__(self, stream: TextIO | None = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            stream = self.stream or sys.stderr
            stream.write(_PREFIXES.get(record.levelno, "") + msg + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


_handler: DiagnosticHandler | None = None


def setup(level: int = logging.WARNING):
    """Attach the diagnostic handler to the ``romswizzle`` logger.

    Calling it again only changes the level.

    Args:
        level: Minimum logging level (default WARNING)
    """
    global _handler

    pkg = logging.getLogger("romswizzle")
    pkg.setLevel(level)
    if _handler is not None:
        return

    _handler = DiagnosticHandler()
    _handler.setFormatter(logging.Formatter("%(message)s"))
    pkg.addHandler(_handler)


def teardown():
    """Remove the diagnostic handler."""
    global _handler

    if _handler is not None:
        pkg = logging.getLogger("romswizzle")
        pkg.removeHandler(_handler)
        pkg.setLevel(logging.NOTSET)
        _handler = None
