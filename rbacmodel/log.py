"""A simple switchable logger and a process-wide current logger."""

from __future__ import annotations

import sys
from typing import Any, TextIO


class Logger:
    """Writes messages to a stream while enabled; silent otherwise."""

    def __init__(self, enabled: bool = False, stream: TextIO | None = None) -> None:
        self._enabled = enabled
        self._stream = stream

    def enable_log(self, enable: bool) -> None:
        """Turn printing of messages on or off."""
        self._enabled = enable

    def is_enabled(self) -> bool:
        """Report whether the logger prints messages."""
        return self._enabled

    def _write(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(message + "\n")

    def print(self, *args: Any) -> None:
        """Log the operands, separated by spaces, if enabled."""
        if self._enabled:
            self._write(" ".join(str(arg) for arg in args))

    def printf(self, fmt: str, *args: Any) -> None:
        """Log ``fmt`` formatted with ``args`` (printf style), if enabled."""
        if self._enabled:
            self._write(fmt % args if args else fmt)


_state: dict[str, Logger] = {"logger": Logger()}


def set_logger(logger: Logger) -> None:
    """Set the current logger."""
    _state["logger"] = logger


def get_logger() -> Logger:
    """Return the current logger."""
    return _state["logger"]


def log_print(*args: Any) -> None:
    """Print through the current logger."""
    _state["logger"].print(*args)


def log_printf(fmt: str, *args: Any) -> None:
    """Print a formatted message through the current logger."""
    _state["logger"].printf(fmt, *args)