"""Event schema registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import DuplicateSchemaError, EventTypeError
from .types import EventType, is_valid_event_type, normalize_event_type

if TYPE_CHECKING:
    from .models import ServerEvent


class EventSchemaRegistry:
    """Maps inbound event type strings to the models that validate them."""

    def __init__(self) -> None:
        self._schemas: dict[str, type[ServerEvent]] = {}

    def register(self, event_class: type[ServerEvent]) -> type[ServerEvent]:
        """Map `event_class.event_type` to `event_class` and return the class unchanged.

        Re-registering the same class is a no-op.

        Raises:
            EventTypeError: If the type name is not a dotted lowercase name
            DuplicateSchemaError: If another class already owns the type name
        """
        event_type = event_class.get_event_type_value()
        if not is_valid_event_type(event_type):
            raise EventTypeError(f"Invalid event type: {event_type!r}")

        existing = self._schemas.get(event_type)
        if existing is not None and existing is not event_class:
            raise DuplicateSchemaError(event_type, existing, event_class)
        self._schemas[event_type] = event_class
        return event_class

    def get_schema(self, event_type: EventType) -> type[ServerEvent] | None:
        return self._schemas.get(normalize_event_type(event_type))


_global_registry = EventSchemaRegistry()


def register_event(event_class: type[ServerEvent]) -> type[ServerEvent]:
    """Class decorator adding an inbound event model to the process-wide registry."""
    return _global_registry.register(event_class)


def get_registry() -> EventSchemaRegistry:
    return _global_registry
