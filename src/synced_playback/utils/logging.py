"""Colored logging formatter for the worker's console output."""

from __future__ import annotations

import logging
import os
import sys

_PACKAGE_PREFIX = "synced_playback."


class ColoredFormatter(logging.Formatter):
    """Logging formatter that colors the levelname and shortens logger names.

    Logger names under the ``synced_playback`` package lose the package prefix,
    so ``synced_playback.infrastructure.scheduling.skip_scheduler`` prints as
    ``infrastructure.scheduling.skip_scheduler``.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = getattr(self, "_stream", None) or sys.stderr
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        use_color = self._use_color()
        short_name = record.name.startswith(_PACKAGE_PREFIX)
        if use_color or short_name:
            record = logging.makeLogRecord(record.__dict__)
        if short_name:
            record.name = record.name[len(_PACKAGE_PREFIX) :]
        if use_color:
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
