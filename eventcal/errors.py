"""
Error types for the event calendar core.

Everything derives from CalendarError. None of these are fatal: callers catch
them, show a message and leave the editor in a stable state.
"""

from typing import Iterable, Optional, Tuple


class CalendarError(Exception):
    """Base class for calendar errors."""


class ValidationError(CalendarError):
    """One or more draft fields are missing or malformed."""

    def __init__(self, fields: Iterable[str], message: Optional[str] = None):
        self.fields: Tuple[str, ...] = tuple(fields)
        if message is None:
            message = f"Please fill in all fields: {', '.join(self.fields)}"
        super().__init__(message)


class InvalidTransitionError(CalendarError):
    """The requested intent is not allowed in the editor's current state."""


class StorageError(CalendarError):
    """A storage backend could not read or write a slot."""


class PersistenceWarning(CalendarError):
    """
    Non-fatal persistence failure.

    Not raised to callers. EventStore keeps it as ``last_warning`` and hands it
    to its ``on_warning`` callback; the in-memory collection stays authoritative.
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Could not persist events during {operation}: {cause}")
