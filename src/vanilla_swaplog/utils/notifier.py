"""
User notifications.

Errors the user must acknowledge (failed loads, missing selection) go
through a Notifier so the presentation layer decides how they surface.
"""

import logging
import sys
from typing import Protocol, TextIO


class Notifier(Protocol):
    """Callable that shows a message to the user."""

    def __call__(self, message: str) -> None: ...


class ConsoleNotifier:
    """Notifier that logs the message and writes it to a console stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """
        Initialize the console notifier.

        Args:
            stream: Output stream (defaults to stderr at call time)
        """
        self.stream = stream
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def __call__(self, message: str) -> None:
        self.logger.warning(f"Notifying user: {message}")
        stream = self.stream or sys.stderr
        print(f"!! {message}", file=stream)
