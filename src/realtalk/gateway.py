"""Outbound gateways: the only place client events leave the process."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from loguru import logger

from realtalk.errors import ChannelNotReadyError, TransportSendError
from realtalk.events.outbound import ClientEvent


class Gateway(Protocol):
    """Fire-and-forget send capability.

    Implementations raise `ChannelNotReadyError` when the channel cannot take
    the event. Retrying is up to the implementation, never the caller.
    """

    def send(self, event: ClientEvent) -> None: ...


class Transport(Protocol):
    """Anything that can write one text frame, such as a data channel or websocket."""

    @property
    def is_open(self) -> bool: ...

    def send(self, data: str) -> None: ...


class ChannelGateway:
    """Serializes client events onto a text transport."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def send(self, event: ClientEvent) -> None:
        if not self._transport.is_open:
            raise ChannelNotReadyError(event.type)
        stamped = event.with_event_id()
        try:
            self._transport.send(stamped.to_json())
        except Exception as exc:
            raise TransportSendError(stamped.type, exc) from exc
        logger.debug("gateway.send type={} event_id={}", stamped.type, stamped.event_id)


class QueueGateway:
    """In-memory async queue drained by a separate writer task."""

    def __init__(self) -> None:
        self._outbound: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def send(self, event: ClientEvent) -> None:
        if not self._open:
            raise ChannelNotReadyError(event.type)
        stamped = event.with_event_id()
        self._outbound.put_nowait(stamped.to_wire())
        logger.debug("gateway.send type={} event_id={}", stamped.type, stamped.event_id)

    async def next_outbound(self, timeout_seconds: float | None = None) -> dict[str, Any] | None:
        if timeout_seconds is None:
            return await self._outbound.get()
        try:
            return await asyncio.wait_for(self._outbound.get(), timeout=timeout_seconds)
        except TimeoutError:
            return None

    def drain(self) -> list[dict[str, Any]]:
        drained: list[dict[str, Any]] = []
        while not self._outbound.empty():
            drained.append(self._outbound.get_nowait())
        return drained
