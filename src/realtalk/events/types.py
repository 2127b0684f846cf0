"""Realtime server event type names."""

from __future__ import annotations

import re
from typing import TypeAlias
from enum import Enum

_EVENT_TYPE_PATTERN = re.compile(r"^[a-z_]+(\.[a-z_]+)+$")


class Stream(Enum):
    """Upstream model that produced an event."""

    RESPONSE = "response"
    TRANSCRIPTION = "transcription"


class ServerEventType(str, Enum):
    """Server event types the reconciliation engine reacts to.

    Names are dot separated, '<domain>[.<subject>...].<action>'.
    """

    RESPONSE_AUDIO_TRANSCRIPT_DELTA = "response.audio_transcript.delta"
    INPUT_TRANSCRIPTION_DELTA = "conversation.item.input_audio_transcription.delta"
    INPUT_TRANSCRIPTION_COMPLETED = "conversation.item.input_audio_transcription.completed"
    RESPONSE_DONE = "response.done"

    @property
    def stream(self) -> Stream:
        if "input_audio_transcription" in self.value:
            return Stream.TRANSCRIPTION
        return Stream.RESPONSE


EventType: TypeAlias = str | Enum


def normalize_event_type(event_type: EventType) -> str:
    """Return the wire name for an event type given as text or enum member."""
    if isinstance(event_type, Enum):
        return str(event_type.value)
    return str(event_type)


def is_valid_event_type(event_type: EventType) -> bool:
    """Check that a name is lowercase with at least one dot, like `response.done`."""
    return _EVENT_TYPE_PATTERN.match(normalize_event_type(event_type)) is not None
