"""Error hierarchy for eventkit."""
from __future__ import annotations


class EventError(Exception):
    """Base error for all eventkit errors."""


class EventClosedError(EventError):
    """Raised when an operation is attempted on a closed Event."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"cannot {operation}() on a closed Event")


class ArgumentMismatchError(EventError, TypeError):
    """Raised when fire() arguments do not match the Event's declared modes."""

    def __init__(self, message: str, *, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(message)


class SelfCheckError(EventError):
    """Raised by a self-check scenario when the Event misbehaves."""
