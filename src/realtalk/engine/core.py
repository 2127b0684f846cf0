"""Reconciliation engine: one owner for all turn-tracking state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from realtalk.engine.correlator import TurnCorrelator, new_turn_key
from realtalk.engine.dispatcher import RecentIds, ToolDispatcher
from realtalk.engine.gate import CompletionGate, GateState
from realtalk.engine.ledger import LedgerChange, TranscriptLedger
from realtalk.events.classifier import (
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
from realtalk.events.outbound import ClientEvent
from realtalk.events.registry import EventSchemaRegistry
from realtalk.events.types import ServerEventType
from realtalk.tools.registry import ToolRegistry


@dataclass(frozen=True)
class EngineStep:
    """Everything one inbound event produced."""

    event: ClassifiedEvent
    changes: list[LedgerChange] = field(default_factory=list)
    outbound: list[ClientEvent] = field(default_factory=list)
    retired: str | None = None


class ReconciliationEngine:
    """Merges response-model and transcription-model events into one ledger.

    Events must be fed one at a time in arrival order. The engine never sends
    anything itself: outbound messages are returned in the `EngineStep` for
    the caller to hand to a gateway.
    """

    def __init__(
        self,
        tools: ToolRegistry,
        *,
        id_factory: Callable[[], str] = new_turn_key,
        history_size: int = 256,
        schemas: EventSchemaRegistry | None = None,
    ) -> None:
        self.tools = tools
        self.ledger = TranscriptLedger()
        self._schemas = schemas
        self._correlator = TurnCorrelator(id_factory)
        self._gate = CompletionGate()
        self._dispatcher = ToolDispatcher(tools, history_size=history_size)
        self._finalized = RecentIds(history_size)
        self._closed = False

    @property
    def active_turn(self) -> str | None:
        return self._correlator.active

    @property
    def gate_state(self) -> GateState:
        return self._gate.state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_invocation(self) -> ToolInvocation | None:
        return self._dispatcher.last_invocation

    def on_event(self, raw: object) -> EngineStep:
        """Classify and apply one decoded server event."""
        if self._closed:
            logger.debug("engine.closed.drop")
            return EngineStep(event=Ignored(event_type="-", reason="engine closed"))
        return self.apply(classify(raw, registry=self._schemas))

    def apply(self, event: ClassifiedEvent) -> EngineStep:
        if self._closed or event.phase is TurnPhase.NONE:
            return EngineStep(event=event)
        if self._is_replayed_final(event):
            return EngineStep(event=event)

        key, opened = self._correlator.ensure_open()
        if opened:
            self._gate.open()

        changes: list[LedgerChange] = []
        outbound: list[ClientEvent] = []
        retire = False
        match event:
            case AgentDelta(text=text):
                _collect(changes, self.ledger.append_agent_delta(key, text))
            case UserDelta(text=text):
                _collect(changes, self.ledger.append_user_delta(key, text))
            case AgentMessageDone(item_id=item_id, transcript=transcript):
                _collect(changes, self.ledger.finalize_agent_message(key, item_id, transcript))
                retire = self._gate.mark_response_done()
            case FunctionCallDone(invocation=invocation):
                outbound.extend(self._dispatcher.dispatch(invocation))
                retire = self._gate.mark_response_done()
            case UserTranscriptDone(transcript=transcript):
                _collect(changes, self.ledger.finalize_user_text(key, transcript))
                retire = self._gate.mark_transcription_done()

        if not retire:
            return EngineStep(event=event, changes=changes, outbound=outbound)

        _collect(changes, self.ledger.seal(key))
        self._correlator.retire()
        logger.info("engine.turn.retired key={} turns={}", key, len(self.ledger))
        return EngineStep(event=event, changes=changes, outbound=outbound, retired=key)

    def close(self) -> None:
        """Drop in-flight turn state. Later events are ignored."""
        if self._closed:
            return
        self._closed = True
        abandoned = self._correlator.retire()
        self._gate.reset()
        logger.info("engine.closed turns={} abandoned={}", len(self.ledger), abandoned or "-")

    def _is_replayed_final(self, event: ClassifiedEvent) -> bool:
        match event:
            case FunctionCallDone(invocation=invocation) if self._dispatcher.seen(invocation.call_id):
                logger.info("engine.final.duplicate call_id={}", invocation.call_id)
                return True
            case AgentMessageDone(item_id=item_id) | FunctionCallDone(item_id=item_id):
                marker = f"{ServerEventType.RESPONSE_DONE.stream.value}:{item_id}"
            case UserTranscriptDone(item_id=str() as item_id):
                marker = f"{ServerEventType.INPUT_TRANSCRIPTION_COMPLETED.stream.value}:{item_id}"
            case _:
                return False
        if self._finalized.add(marker):
            return False
        logger.info("engine.final.duplicate marker={}", marker)
        return True


def _collect(changes: list[LedgerChange], change: LedgerChange | None) -> None:
    if change is not None:
        changes.append(change)
