"""Realtime protocol events: inbound schemas, classification, and outbound messages."""

from .classifier import (
    AgentDelta,
    AgentMessageDone,
    ClassifiedEvent,
    FunctionCallDone,
    Ignored,
    ToolInvocation,
    TurnPhase,
    UserDelta,
    UserTranscriptDone,
    classify,
)
from .exceptions import DuplicateSchemaError, EventError, EventTypeError
from .models import ServerEvent
from .outbound import (
    ClientEvent,
    ConversationItemCreateEvent,
    ResponseCreateEvent,
    SessionUpdateEvent,
    build_session_update,
    build_tool_result,
)
from .registry import EventSchemaRegistry, get_registry, register_event
from .types import ServerEventType, Stream

__all__ = [  # noqa: RUF022
    # Classification
    "classify",
    "ClassifiedEvent",
    "AgentDelta",
    "UserDelta",
    "AgentMessageDone",
    "FunctionCallDone",
    "UserTranscriptDone",
    "Ignored",
    "ToolInvocation",
    "TurnPhase",
    # Schemas
    "ServerEvent",
    "ServerEventType",
    "Stream",
    "EventSchemaRegistry",
    "register_event",
    "get_registry",
    # Outbound
    "ClientEvent",
    "SessionUpdateEvent",
    "ConversationItemCreateEvent",
    "ResponseCreateEvent",
    "build_session_update",
    "build_tool_result",
    # Exceptions
    "EventError",
    "EventTypeError",
    "DuplicateSchemaError",
]
