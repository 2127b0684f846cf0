"""Errors raised while registering server event schemas."""


class EventError(Exception):
    """Base exception for server event schema errors."""


class EventTypeError(EventError):
    """Raised for an event type name that cannot be registered."""


class DuplicateSchemaError(EventTypeError, ValueError):
    """Raised when a second model claims an event type already taken."""

    def __init__(self, event_type: str, existing: type, candidate: type) -> None:
        super().__init__(
            f"event type {event_type!r} already registered by {existing.__name__}, refusing {candidate.__name__}"
        )
        self.event_type = event_type

