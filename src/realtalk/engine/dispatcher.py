"""Dispatch finalized function calls to local tools."""

from __future__ import annotations

from collections import OrderedDict
from typing import Any

from loguru import logger

from realtalk.errors import ToolError, UnknownToolError
from realtalk.events.classifier import ToolInvocation
from realtalk.events.outbound import ClientEvent, ResponseCreateEvent, build_tool_result
from realtalk.tools.registry import ToolRegistry


class RecentIds:
    """Bounded set that forgets the oldest ids first."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._ids: OrderedDict[str, None] = OrderedDict()

    def __contains__(self, item: object) -> bool:
        return item in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, item: str) -> bool:
        """Remember `item`. Returns False if it was already known."""
        if item in self._ids:
            return False
        self._ids[item] = None
        while len(self._ids) > self._capacity:
            self._ids.popitem(last=False)
        return True


class ToolDispatcher:
    """Runs one tool per function call and acknowledges it to the model.

    Every dispatched call id gets exactly one `function_call_output` item back,
    whether the tool ran, failed, or does not exist. Tools registered with
    `continue_response` are followed by a `response.create`. A call id seen
    before is dropped without side effects or messages.
    """

    def __init__(self, registry: ToolRegistry, *, history_size: int = 256) -> None:
        self._registry = registry
        self._dispatched = RecentIds(history_size)
        self.last_invocation: ToolInvocation | None = None

    def seen(self, call_id: str) -> bool:
        return call_id in self._dispatched

    def dispatch(self, invocation: ToolInvocation) -> list[ClientEvent]:
        if not self._dispatched.add(invocation.call_id):
            logger.info("tool.dispatch.duplicate name={} call_id={}", invocation.name, invocation.call_id)
            return []

        self.last_invocation = invocation
        descriptor = self._registry.get(invocation.name)
        payload: dict[str, Any]
        try:
            result = self._registry.execute(invocation.name, arguments=invocation.arguments, call_id=invocation.call_id)
            payload = {"response": f"Tool call {invocation.name} executed successfully."}
            if result is not None:
                payload["result"] = result if isinstance(result, (str, int, float, bool)) else str(result)
        except UnknownToolError:
            logger.warning("tool.dispatch.unknown name={} call_id={}", invocation.name, invocation.call_id)
            payload = {"response": f"Tool call {invocation.name} is not available.", "error": "unknown tool"}
        except ToolError as exc:
            logger.warning("tool.dispatch.failed name={} call_id={} error={}", invocation.name, invocation.call_id, exc)
            payload = {"response": f"Tool call {invocation.name} failed.", "error": str(exc)}

        outbound: list[ClientEvent] = [build_tool_result(invocation.call_id, payload)]
        if descriptor is not None and descriptor.continue_response:
            outbound.append(ResponseCreateEvent())
        return outbound
