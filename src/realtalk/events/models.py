"""Inbound server event models.

Only the fields the reconciliation engine reads are declared. Everything else
the server sends is ignored so newer protocol revisions keep parsing.
"""

from __future__ import annotations

import json
from abc import ABC
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from .registry import register_event
from .types import EventType, ServerEventType, normalize_event_type


class ServerEvent(BaseModel, ABC):
    """Base class for inbound events.

    Subclasses define their event_type and register themselves with
    `register_event` so the classifier can find them.
    """

    event_type: ClassVar[EventType]

    model_config = ConfigDict(extra="ignore")

    type: str
    event_id: str | None = None

    @classmethod
    def get_event_type_value(cls) -> str:
        """Get the string value of the event type."""
        return normalize_event_type(cls.event_type)


@register_event
class AgentTranscriptDelta(ServerEvent):
    """Incremental transcript of the audio the response model is speaking."""

    event_type = ServerEventType.RESPONSE_AUDIO_TRANSCRIPT_DELTA
    delta: str = ""
    response_id: str | None = None
    item_id: str | None = None


@register_event
class UserTranscriptionDelta(ServerEvent):
    """Incremental transcript of the user's speech from the transcription model."""

    event_type = ServerEventType.INPUT_TRANSCRIPTION_DELTA
    delta: str = ""
    item_id: str | None = None


@register_event
class UserTranscriptionCompleted(ServerEvent):
    """Authoritative transcript of one user utterance."""

    event_type = ServerEventType.INPUT_TRANSCRIPTION_COMPLETED
    transcript: str
    item_id: str | None = None


class ResponsePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    status: str | None = None
    output: list[dict[str, Any]] = Field(default_factory=list)


@register_event
class ResponseDone(ServerEvent):
    """Final state of one model response, including its output items."""

    event_type = ServerEventType.RESPONSE_DONE
    response: ResponsePayload

    def first_output(self) -> dict[str, Any] | None:
        if not self.response.output:
            return None
        return self.response.output[0]


class ContentPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    transcript: str | None = None
    text: str | None = None


class MessageOutputItem(BaseModel):
    """A completed assistant message inside `response.done`."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["message"]
    id: str
    role: str | None = None
    status: str | None = None
    content: list[ContentPart] = Field(default_factory=list)

    def transcript(self) -> str | None:
        for part in self.content:
            if part.transcript:
                return part.transcript
        return None


class FunctionCallOutputItem(BaseModel):
    """A completed function call inside `response.done`."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["function_call"]
    id: str
    name: str
    call_id: str
    arguments: str | dict[str, Any] = ""
    status: str | None = None

    def arguments_text(self) -> str:
        if isinstance(self.arguments, str):
            return self.arguments
        return json.dumps(self.arguments, ensure_ascii=False)


OUTPUT_ITEM_MODELS: dict[str, type[MessageOutputItem] | type[FunctionCallOutputItem]] = {
    "message": MessageOutputItem,
    "function_call": FunctionCallOutputItem,
}
