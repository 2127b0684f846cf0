"""Completion gate for the currently open turn."""

from __future__ import annotations

from enum import Enum


class GateState(Enum):
    IDLE = "idle"
    OPEN = "open"
    RESPONSE_DONE = "response_done"
    TRANSCRIPTION_DONE = "transcription_done"
    RETIRED = "retired"


class CompletionGate:
    """Tracks both finalizations of one turn.

    A turn may only be retired once the response model and the transcription
    model have each finalized it, in either order. If one of them never does,
    the gate stays open and the turn keeps collecting deltas.
    """

    def __init__(self) -> None:
        self.response_done = False
        self.transcription_done = False
        self._open = False

    @property
    def state(self) -> GateState:
        if not self._open:
            return GateState.IDLE
        if self.response_done and self.transcription_done:
            return GateState.RETIRED
        if self.response_done:
            return GateState.RESPONSE_DONE
        if self.transcription_done:
            return GateState.TRANSCRIPTION_DONE
        return GateState.OPEN

    def open(self) -> None:
        self.reset()
        self._open = True

    def mark_response_done(self) -> bool:
        """Record the response-model finalization. Returns True if the turn retires."""
        self.response_done = True
        return self._settle()

    def mark_transcription_done(self) -> bool:
        """Record the transcription-model finalization. Returns True if the turn retires."""
        self.transcription_done = True
        return self._settle()

    def reset(self) -> None:
        self.response_done = False
        self.transcription_done = False
        self._open = False

    def _settle(self) -> bool:
        if self.state is not GateState.RETIRED:
            return False
        self.reset()
        return True
