from __future__ import annotations

import json

import pytest
from pydantic import BaseModel

from realtalk.engine import RecentIds, ToolDispatcher
from realtalk.events import ConversationItemCreateEvent, ResponseCreateEvent, ToolInvocation
from realtalk.tools import RecordingNavigator, ToolRegistry


def _output(event: object) -> dict[str, object]:
    assert isinstance(event, ConversationItemCreateEvent)
    return json.loads(event.item.output)


def test_navigate_call_acknowledges_and_continues(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    dispatcher = ToolDispatcher(tools)

    outbound = dispatcher.dispatch(ToolInvocation(name="navigate", arguments='{"page":"/about"}', call_id="c1"))

    assert navigator.pages == ["/about"]
    assert len(outbound) == 2
    ack, follow_up = outbound
    assert isinstance(ack, ConversationItemCreateEvent)
    assert ack.item.type == "function_call_output"
    assert ack.item.call_id == "c1"
    assert _output(ack) == {"response": "Tool call navigate executed successfully."}
    assert isinstance(follow_up, ResponseCreateEvent)
    assert dispatcher.last_invocation == ToolInvocation(name="navigate", arguments='{"page":"/about"}', call_id="c1")


def test_replayed_call_id_is_dropped(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    dispatcher = ToolDispatcher(tools)
    invocation = ToolInvocation(name="navigate", arguments='{"page":"/about"}', call_id="c1")

    first = dispatcher.dispatch(invocation)
    second = dispatcher.dispatch(invocation)

    assert len(first) == 2
    assert second == []
    assert navigator.pages == ["/about"]


def test_unparseable_arguments_are_acknowledged_as_failure(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    outbound = ToolDispatcher(tools).dispatch(ToolInvocation(name="navigate", arguments="{page: /about", call_id="c1"))

    assert navigator.pages == []
    payload = _output(outbound[0])
    assert payload["response"] == "Tool call navigate failed."
    assert "invalid arguments for navigate" in str(payload["error"])
    assert isinstance(outbound[1], ResponseCreateEvent)


def test_unlisted_page_is_acknowledged_as_failure(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    invocation = ToolInvocation(name="navigate", arguments='{"page":"/admin"}', call_id="c1")
    outbound = ToolDispatcher(tools).dispatch(invocation)

    assert navigator.pages == []
    assert _output(outbound[0]) == {"response": "Tool call navigate failed.", "error": "page not available: /admin"}


def test_unknown_tool_gets_ack_only(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    outbound = ToolDispatcher(tools).dispatch(ToolInvocation(name="order_pizza", arguments="{}", call_id="c9"))

    assert len(outbound) == 1
    assert outbound[0].item.call_id == "c9"
    assert _output(outbound[0]) == {"response": "Tool call order_pizza is not available.", "error": "unknown tool"}
    assert navigator.pages == []


class LookupInput(BaseModel):
    key: str


def test_tool_result_is_included_and_no_continuation_by_default() -> None:
    registry = ToolRegistry()
    registry.register(name="lookup", description="lookup", model=LookupInput)(lambda params: params.key.upper())

    outbound = ToolDispatcher(registry).dispatch(ToolInvocation(name="lookup", arguments='{"key":"abc"}', call_id="c1"))

    assert len(outbound) == 1
    assert _output(outbound[0]) == {"response": "Tool call lookup executed successfully.", "result": "ABC"}


def test_dispatch_history_is_bounded(tools: ToolRegistry, navigator: RecordingNavigator) -> None:
    dispatcher = ToolDispatcher(tools, history_size=2)
    for call_id in ("c1", "c2", "c3"):
        dispatcher.dispatch(ToolInvocation(name="navigate", arguments='{"page":"/"}', call_id=call_id))

    assert len(dispatcher.dispatch(ToolInvocation(name="navigate", arguments='{"page":"/"}', call_id="c1"))) == 2
    assert dispatcher.dispatch(ToolInvocation(name="navigate", arguments='{"page":"/"}', call_id="c3")) == []
    assert navigator.pages == ["/", "/", "/", "/"]


def test_recent_ids_evicts_oldest_first() -> None:
    recent = RecentIds(2)
    assert recent.add("a") is True
    assert recent.add("b") is True
    assert recent.add("a") is False
    assert recent.add("c") is True
    assert "a" not in recent
    assert "b" in recent
    assert len(recent) == 2


def test_recent_ids_requires_positive_capacity() -> None:
    with pytest.raises(ValueError, match="capacity"):
        RecentIds(0)


def test_seen_reports_dispatched_call_ids(tools: ToolRegistry) -> None:
    dispatcher = ToolDispatcher(tools)
    assert dispatcher.seen("c1") is False

    dispatcher.dispatch(ToolInvocation(name="order_pizza", arguments="{}", call_id="c1"))

    assert dispatcher.seen("c1") is True
