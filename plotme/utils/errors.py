#!/usr/bin/env python3
"""
Error types and error-log helpers for PlotMe.

Failures inside the core are turned into descriptive strings and collected in
an ErrorLog instead of being propagated to the GUI as exceptions.
"""

from typing import Iterator, List

from .constants import ERROR_LOG_CAPACITY


class PlotMeError(Exception):
    """Base exception for PlotMe errors."""
    pass


class ConfigPathError(PlotMeError):
    """Exception raised when the default session path cannot be resolved."""
    pass


class SessionFormatError(PlotMeError):
    """Exception raised when a session document is malformed."""
    pass


def error_string(base_message: str, err: BaseException) -> str:
    """
    Format an exception as a log message.

    Args:
        base_message: Context describing the failed operation
        err: The exception that was raised

    Returns:
        Message of the form "<base_message>: <err>"
    """
    return f"{base_message}: {err}"


class ErrorLog:
    """
    Bounded, user-visible log of error and warning messages.

    Only the most recent ``capacity`` messages are retained. Messages are
    echoed to stdout unless the caller asks for them to be kept quiet;
    ``quiet_count`` counts those so the caller can print a summary instead.
    """

    def __init__(self, capacity: int = ERROR_LOG_CAPACITY) -> None:
        self.capacity = capacity
        self.quiet_count = 0
        self._messages: List[str] = []

    def append(self, message: str, echo: bool = True) -> None:
        """Add a message, dropping the oldest ones beyond capacity."""
        if echo:
            print(message)
        else:
            self.quiet_count += 1
        self._messages.append(message)
        if len(self._messages) > self.capacity:
            self._messages = self._messages[-self.capacity:]

    def messages(self) -> List[str]:
        """Return a copy of the retained messages, oldest first."""
        return list(self._messages)

    def text(self) -> str:
        return "\n".join(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))
