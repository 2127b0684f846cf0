"""Realtime session: wires the engine to a gateway and to presentation signals."""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, Callable, Iterable, Mapping
from typing import Any, TypeAlias

from blinker import Signal
from loguru import logger

from realtalk.config import Settings
from realtalk.engine import EngineStep, LedgerChange, ReconciliationEngine, TurnView, new_turn_key
from realtalk.errors import GatewayError
from realtalk.events.outbound import ClientEvent, SessionUpdateEvent, build_session_update
from realtalk.gateway import Gateway
from realtalk.tools import Navigator, build_tool_registry

RawMessage: TypeAlias = str | bytes | bytearray | Mapping[str, Any]
TranscriptHandler = Callable[[LedgerChange], None]
ErrorHandler = Callable[[str, Exception], None]


def decode_message(message: RawMessage) -> object | None:
    """Decode one inbound frame. Returns None when it is not valid JSON."""
    if isinstance(message, (bytes, bytearray)):
        try:
            message = message.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("session.decode.failed reason=not utf-8")
            return None
    if isinstance(message, str):
        try:
            return json.loads(message)
        except json.JSONDecodeError as exc:
            logger.warning("session.decode.failed reason={}", exc.msg)
            return None
    return message


class RealtimeSession:
    """One conversation with the realtime model."""

    def __init__(self, engine: ReconciliationEngine, gateway: Gateway, settings: Settings) -> None:
        self.engine = engine
        self.settings = settings
        self._gateway = gateway
        self._transcript = Signal("realtalk.transcript")
        self._errors = Signal("realtalk.error")
        self._configured = False

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        gateway: Gateway,
        navigator: Navigator,
        plugins: Iterable[object] = (),
        load_entrypoints: bool = False,
        id_factory: Callable[[], str] = new_turn_key,
    ) -> RealtimeSession:
        tools = build_tool_registry(settings, navigator=navigator, plugins=plugins, load_entrypoints=load_entrypoints)
        engine = ReconciliationEngine(tools, id_factory=id_factory, history_size=settings.dispatch_history_size)
        return cls(engine, gateway, settings)

    @property
    def closed(self) -> bool:
        return self.engine.closed

    @property
    def transcript(self) -> list[TurnView]:
        """Conversation so far, newest turn first."""
        return self.engine.ledger.newest_first()

    def session_update(self) -> SessionUpdateEvent:
        return build_session_update(
            tools=self.engine.tools.model_tools(),
            instructions=self.settings.session_instructions(),
            transcription_model=self.settings.transcription_model,
            max_response_tokens=self.settings.max_response_tokens,
        )

    def on_open(self) -> bool:
        """Send the session configuration once the channel is ready."""
        if self._configured:
            return True
        self._configured = self._send(self.session_update())
        if self._configured:
            logger.info("session.configured tools={}", len(self.engine.tools.descriptors()))
        return self._configured

    def handle_message(self, message: RawMessage) -> EngineStep | None:
        if self.closed:
            logger.debug("session.closed.drop")
            return None
        decoded = decode_message(message)
        if decoded is None:
            return None
        step = self.engine.on_event(decoded)
        for change in step.changes:
            self._emit(self._transcript, "transcript", change=change)
        for event in step.outbound:
            self._send(event)
        return step

    async def pump(self, messages: AsyncIterable[RawMessage]) -> int:
        """Handle messages in arrival order until the source ends or the session closes."""
        handled = 0
        async for message in messages:
            if self.closed:
                break
            self.handle_message(message)
            handled += 1
        return handled

    def close(self) -> None:
        self.engine.close()

    def on_transcript(self, handler: TranscriptHandler) -> Callable[[], None]:
        def _receiver(sender: Any, *, change: LedgerChange) -> None:
            handler(change)

        self._transcript.connect(_receiver, weak=False)
        return lambda: self._transcript.disconnect(_receiver)

    def on_error(self, handler: ErrorHandler) -> Callable[[], None]:
        def _receiver(sender: Any, *, stage: str, error: Exception) -> None:
            handler(stage, error)

        self._errors.connect(_receiver, weak=False)
        return lambda: self._errors.disconnect(_receiver)

    def _send(self, event: ClientEvent) -> bool:
        try:
            self._gateway.send(event)
        except GatewayError as exc:
            logger.error("session.send.failed type={} error={}", event.type, exc)
            self._emit(self._errors, "error", stage="send", error=exc)
            return False
        return True

    def _emit(self, signal: Signal, name: str, **kwargs: Any) -> None:
        try:
            signal.send(self, **kwargs)
        except Exception:
            logger.opt(exception=True).warning("session.signal.failed signal={}", name)
