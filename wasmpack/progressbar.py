"""User-facing status messages filtered by quiet mode and log level."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Maximum level of messages to show; lower values are less verbose."""

    ERROR = 0
    WARN = 1
    INFO = 2


_LEVEL_NAMES = {
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "info": LogLevel.INFO,
}

WARN_EMOJI = ":-)"
ERROR_EMOJI = ":-("


def parse_log_level(s: str) -> LogLevel:
    """Parse a log level name such as ``"info"``."""
    try:
        return _LEVEL_NAMES[s]
    except KeyError:
        raise ValueError(f"Unknown log-level: {s}") from None


@dataclass
class ProgressOutput:
    """Prints status messages to standard error."""

    quiet: bool = False
    log_level: LogLevel = LogLevel.INFO

    def _message(self, message: str) -> None:
        print(message, file=sys.stderr)

    def is_log_enabled(self, level: LogLevel) -> bool:
        """Whether messages of ``level`` are shown at the current log level."""
        return int(level) <= int(self.log_level)

    def info(self, message: str) -> None:
        """Show an informational message."""
        if not self.quiet and self.is_log_enabled(LogLevel.INFO):
            self._message(f"[INFO]: {message}")

    def warn(self, message: str) -> None:
        """Show a warning."""
        if not self.quiet and self.is_log_enabled(LogLevel.WARN):
            self._message(f"[WARN]: {WARN_EMOJI} {message}")

    def error(self, message: str) -> None:
        """Show an error; quiet mode does not silence errors."""
        if self.is_log_enabled(LogLevel.ERROR):
            self._message(f"[ERR]: {ERROR_EMOJI} {message}")


PBAR = ProgressOutput()