"""Outbound client event models."""

from __future__ import annotations

import json
import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ClientEvent(BaseModel):
    """Base class for events the client sends to the realtime model."""

    model_config = ConfigDict(extra="forbid")

    type: str
    event_id: str | None = None

    def with_event_id(self) -> ClientEvent:
        if self.event_id:
            return self
        return self.model_copy(update={"event_id": uuid.uuid4().hex})

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False)


class TranscriptionConfig(BaseModel):
    model: str


class SessionConfig(BaseModel):
    tools: list[dict[str, Any]] = Field(default_factory=list)
    instructions: str
    input_audio_transcription: TranscriptionConfig
    max_response_output_tokens: int


class SessionUpdateEvent(ClientEvent):
    type: Literal["session.update"] = "session.update"
    session: SessionConfig


class FunctionCallResultItem(BaseModel):
    type: Literal["function_call_output"] = "function_call_output"
    call_id: str
    output: str


class ConversationItemCreateEvent(ClientEvent):
    type: Literal["conversation.item.create"] = "conversation.item.create"
    item: FunctionCallResultItem


class ResponseCreateEvent(ClientEvent):
    """Asks the model to produce its next response."""

    type: Literal["response.create"] = "response.create"


def build_session_update(
    *,
    tools: list[dict[str, Any]],
    instructions: str,
    transcription_model: str,
    max_response_tokens: int,
) -> SessionUpdateEvent:
    return SessionUpdateEvent(
        session=SessionConfig(
            tools=tools,
            instructions=instructions,
            input_audio_transcription=TranscriptionConfig(model=transcription_model),
            max_response_output_tokens=max_response_tokens,
        )
    )


def build_tool_result(call_id: str, payload: dict[str, Any]) -> ConversationItemCreateEvent:
    return ConversationItemCreateEvent(
        item=FunctionCallResultItem(call_id=call_id, output=json.dumps(payload, ensure_ascii=False)),
    )
