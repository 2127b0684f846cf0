"""Classify raw server events into the cases the engine reacts to."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from loguru import logger
from pydantic import ValidationError

from .models import (
    OUTPUT_ITEM_MODELS,
    AgentTranscriptDelta,
    FunctionCallOutputItem,
    MessageOutputItem,
    ResponseDone,
    ServerEvent,
    UserTranscriptionCompleted,
    UserTranscriptionDelta,
)
from .registry import EventSchemaRegistry, get_registry


class TurnPhase(Enum):
    """Where an event sits in the lifecycle of a turn."""

    DELTA = "delta"
    FINAL = "final"
    NONE = "none"


@dataclass(frozen=True)
class ToolInvocation:
    """One function call requested by the model."""

    name: str
    arguments: str
    call_id: str


@dataclass(frozen=True)
class AgentDelta:
    text: str
    phase: TurnPhase = TurnPhase.DELTA


@dataclass(frozen=True)
class UserDelta:
    text: str
    phase: TurnPhase = TurnPhase.DELTA


@dataclass(frozen=True)
class AgentMessageDone:
    item_id: str
    transcript: str | None
    phase: TurnPhase = TurnPhase.FINAL


@dataclass(frozen=True)
class FunctionCallDone:
    item_id: str
    invocation: ToolInvocation
    phase: TurnPhase = TurnPhase.FINAL


@dataclass(frozen=True)
class UserTranscriptDone:
    item_id: str | None
    transcript: str
    phase: TurnPhase = TurnPhase.FINAL


@dataclass(frozen=True)
class Ignored:
    event_type: str
    reason: str
    phase: TurnPhase = TurnPhase.NONE


ClassifiedEvent: TypeAlias = AgentDelta | UserDelta | AgentMessageDone | FunctionCallDone | UserTranscriptDone | Ignored


def classify(raw: object, *, registry: EventSchemaRegistry | None = None) -> ClassifiedEvent:
    """Map one decoded server event to exactly one classified case.

    Never raises. Anything that is not a well-formed instance of a known
    event comes back as `Ignored`.
    """

    if not isinstance(raw, Mapping):
        return _ignore("-", "not an object", warn=True)

    event_type = raw.get("type")
    if not isinstance(event_type, str) or not event_type:
        return _ignore("-", "missing type", warn=True)

    schema = (registry or get_registry()).get_schema(event_type)
    if schema is None:
        return _ignore(event_type, "unrecognized type")

    try:
        event = schema.model_validate(dict(raw))
    except ValidationError as exc:
        return _ignore(event_type, f"malformed: {exc.error_count()} validation error(s)", warn=True)

    return _classify_event(event)


def _classify_event(event: ServerEvent) -> ClassifiedEvent:
    match event:
        case AgentTranscriptDelta(delta=delta):
            return AgentDelta(text=delta)
        case UserTranscriptionDelta(delta=delta):
            return UserDelta(text=delta)
        case UserTranscriptionCompleted(transcript=transcript, item_id=item_id):
            if not transcript:
                return _ignore(event.type, "empty transcript")
            return UserTranscriptDone(item_id=item_id, transcript=transcript)
        case ResponseDone():
            return _classify_response_done(event)
        case _:
            return _ignore(event.type, "no classification rule")


def _classify_response_done(event: ResponseDone) -> ClassifiedEvent:
    output = event.first_output()
    if output is None:
        return _ignore(event.type, "no output item")

    item_model = OUTPUT_ITEM_MODELS.get(str(output.get("type")))
    if item_model is None:
        return _ignore(event.type, f"unsupported output item: {output.get('type')}")

    try:
        item = item_model.model_validate(output)
    except ValidationError as exc:
        return _ignore(event.type, f"malformed output item: {exc.error_count()} validation error(s)", warn=True)

    if isinstance(item, MessageOutputItem):
        return AgentMessageDone(item_id=item.id, transcript=item.transcript())
    if isinstance(item, FunctionCallOutputItem):
        invocation = ToolInvocation(name=item.name, arguments=item.arguments_text(), call_id=item.call_id)
        return FunctionCallDone(item_id=item.id, invocation=invocation)
    return _ignore(event.type, "no classification rule")


def _ignore(event_type: str, reason: str, *, warn: bool = False) -> Ignored:
    if warn:
        logger.warning("event.ignored type={} reason={}", event_type, reason)
    else:
        logger.debug("event.ignored type={} reason={}", event_type, reason)
    return Ignored(event_type=event_type, reason=reason)
