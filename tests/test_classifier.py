from __future__ import annotations

import pytest
from fixtures_events import agent_delta, function_call_done, message_done, user_completed, user_delta

from realtalk.events import (
    AgentDelta,
    AgentMessageDone,
    EventSchemaRegistry,
    FunctionCallDone,
    Ignored,
    ToolInvocation,
    TurnPhase,
    UserDelta,
    UserTranscriptDone,
    classify,
)


def test_agent_delta_is_classified_as_delta() -> None:
    event = classify(agent_delta("Hel"))
    assert event == AgentDelta(text="Hel")
    assert event.phase is TurnPhase.DELTA


def test_user_delta_is_classified_as_delta() -> None:
    assert classify(user_delta("How")) == UserDelta(text="How")


def test_transcription_completed_carries_final_transcript() -> None:
    event = classify(user_completed("How are you?", item_id="item_9"))
    assert event == UserTranscriptDone(item_id="item_9", transcript="How are you?")
    assert event.phase is TurnPhase.FINAL


def test_response_done_with_message_output() -> None:
    event = classify(message_done("I'm doing well.", item_id="item_m1"))
    assert event == AgentMessageDone(item_id="item_m1", transcript="I'm doing well.")


def test_response_done_message_without_transcript_still_finalizes() -> None:
    event = classify(message_done(None, item_id="item_m1"))
    assert isinstance(event, AgentMessageDone)
    assert event.transcript is None


def test_response_done_with_function_call_output() -> None:
    event = classify(function_call_done("navigate", '{"page":"/about"}', "c1", item_id="item_f1"))
    assert event == FunctionCallDone(
        item_id="item_f1",
        invocation=ToolInvocation(name="navigate", arguments='{"page":"/about"}', call_id="c1"),
    )


def test_function_call_object_arguments_are_normalized_to_json_text() -> None:
    event = classify(function_call_done("navigate", {"page": "/"}, "c2"))
    assert isinstance(event, FunctionCallDone)
    assert event.invocation.arguments == '{"page": "/"}'


def test_unknown_fields_are_ignored() -> None:
    raw = {**agent_delta("hi"), "obfuscation": "xyz", "future": {"nested": [1, 2]}}
    assert classify(raw) == AgentDelta(text="hi")


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ({"type": "session.created", "session": {}}, "unrecognized type"),
        ({"type": "input_audio_buffer.speech_started"}, "unrecognized type"),
        ({"delta": "no type"}, "missing type"),
        ({"type": ""}, "missing type"),
        ("response.done", "not an object"),
        (None, "not an object"),
        ([agent_delta("x")], "not an object"),
    ],
)
def test_unrecognized_input_is_ignored(raw: object, reason: str) -> None:
    event = classify(raw)
    assert isinstance(event, Ignored)
    assert event.reason == reason
    assert event.phase is TurnPhase.NONE


def test_completed_without_transcript_is_malformed() -> None:
    raw = user_completed("x")
    del raw["transcript"]
    event = classify(raw)
    assert isinstance(event, Ignored)
    assert event.reason.startswith("malformed")


def test_completed_with_empty_transcript_is_ignored() -> None:
    assert isinstance(classify(user_completed("")), Ignored)


def test_response_done_without_output_is_ignored() -> None:
    raw = message_done("x")
    raw["response"]["output"] = []
    event = classify(raw)
    assert isinstance(event, Ignored)
    assert event.reason == "no output item"


def test_response_done_without_response_is_malformed() -> None:
    event = classify({"type": "response.done"})
    assert isinstance(event, Ignored)
    assert event.reason.startswith("malformed")


def test_response_done_with_unsupported_output_item_is_ignored() -> None:
    raw = message_done("x")
    raw["response"]["output"][0]["type"] = "reasoning"
    event = classify(raw)
    assert isinstance(event, Ignored)
    assert "unsupported output item" in event.reason


def test_function_call_missing_call_id_is_malformed() -> None:
    raw = function_call_done("navigate", "{}", "c1")
    del raw["response"]["output"][0]["call_id"]
    event = classify(raw)
    assert isinstance(event, Ignored)
    assert event.reason.startswith("malformed output item")


def test_only_first_output_item_is_classified() -> None:
    raw = function_call_done("navigate", "{}", "c1")
    raw["response"]["output"].append(message_done("later")["response"]["output"][0])
    assert isinstance(classify(raw), FunctionCallDone)


def test_classify_with_empty_registry_ignores_everything() -> None:
    event = classify(agent_delta("hi"), registry=EventSchemaRegistry())
    assert isinstance(event, Ignored)
    assert event.reason == "unrecognized type"
