import copy

from lmstudio_bridge.common.transformations import (
    transform_request_for_responses,
    transform_response_from_responses,
)


def test_request_joins_non_empty_messages_in_order():
    body = {
        "model": "gpt-oss",
        "messages": [
            {"role": "system", "content": "You are helpful"},
            {"role": "user", "content": ""},
            {"role": "user", "content": [{"type": "text", "text": "dropped"}]},
            {"role": "assistant", "content": None},
            {"role": "user", "content": "hello"},
        ],
    }

    result = transform_request_for_responses(body)

    assert result["model"] == "gpt-oss"
    assert result["input"] == "You are helpful\n\nhello"
    assert result["input"].split("\n\n") == ["You are helpful", "hello"]
    assert "messages" not in result
    assert "reasoning" not in result


def test_request_without_messages_yields_empty_input():
    result = transform_request_for_responses({"model": "m"})

    assert result["input"] == ""


def test_request_without_model_omits_model_key():
    result = transform_request_for_responses({"messages": [{"role": "user", "content": "hi"}]})

    assert result == {"input": "hi"}


def test_request_reasoning_effort_from_body_wins():
    body = {
        "model": "m",
        "messages": [{"role": "user", "content": "hi"}],
        "reasoning_effort": "low",
    }

    result = transform_request_for_responses(body, reasoning_effort="high")

    assert result["reasoning"] == {"effort": "low"}
    assert "reasoning_effort" not in result


def test_request_reasoning_effort_falls_back_to_option():
    body = {"model": "m", "messages": [{"role": "user", "content": "hi"}]}

    result = transform_request_for_responses(body, reasoning_effort="medium")

    assert result["reasoning"] == {"effort": "medium"}


def test_request_copies_unknown_fields_and_drops_user():
    body = {
        "model": "m",
        "messages": [{"role": "user", "content": "hi"}],
        "user": "u-1",
        "temperature": 0.3,
        "stream": True,
        "max_output_tokens": 64,
        "some_future_field": {"a": 1},
    }

    result = transform_request_for_responses(body)

    assert "user" not in result
    assert result["temperature"] == 0.3
    assert result["stream"] is True
    assert result["max_output_tokens"] == 64
    assert result["some_future_field"] == {"a": 1}


def test_request_fixes_and_flattens_tools():
    body = {
        "model": "m",
        "messages": [{"role": "user", "content": "weather?"}],
        "tools": [
            {
                "type": "function",
                "function": {
                    "name": "get_weather",
                    "description": "Get the weather",
                    "parameters": {"properties": {"city": {"type": "string"}}},
                },
            },
            {"type": "web_search"},
        ],
    }

    result = transform_request_for_responses(body)

    assert result["tools"] == [
        {
            "type": "function",
            "name": "get_weather",
            "description": "Get the weather",
            "parameters": {"type": "object", "properties": {"city": {"type": "string"}}},
        },
        {"type": "web_search"},
    ]
    # The caller's body keeps its nested shape
    assert "function" in body["tools"][0]


def test_request_non_list_tools_copied_verbatim():
    body = {"model": "m", "messages": [], "tools": "auto"}

    result = transform_request_for_responses(body)

    assert result["tools"] == "auto"


def test_request_does_not_mutate_body():
    body = {
        "model": "m",
        "messages": [{"role": "user", "content": "hi"}],
        "reasoning_effort": "high",
        "user": "u",
    }
    before = copy.deepcopy(body)

    transform_request_for_responses(body)

    assert body == before


def _response(output, usage=None):
    data = {
        "id": "resp_1",
        "object": "response",
        "created_at": 1700000000,
        "status": "completed",
        "model": "gpt-oss",
        "output": output,
    }
    if usage is not None:
        data["usage"] = usage
    return data


REASONING_ITEM = {
    "id": "rs_1",
    "type": "reasoning",
    "content": [{"type": "reasoning_text", "text": "Let me think"}],
}


def _message(text, status="completed", role="assistant"):
    return {
        "id": "msg_1",
        "type": "message",
        "role": role,
        "status": status,
        "content": [{"type": "output_text", "text": text}],
    }


def test_response_message_with_reasoning():
    usage = {"input_tokens": 3, "output_tokens": 5, "total_tokens": 8}
    chat = transform_response_from_responses(_response([REASONING_ITEM, _message("Hello")], usage))

    assert chat["id"] == "resp_1"
    assert chat["object"] == "chat.completion"
    assert chat["created"] == 1700000000
    assert chat["model"] == "gpt-oss"
    assert chat["choices"] == [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello", "reasoning": "Let me think"},
            "finish_reason": "stop",
        }
    ]
    # usage keeps the Responses field names in the non-streaming path
    assert chat["usage"] == usage


def test_response_reasoning_repeated_on_every_choice():
    output = [REASONING_ITEM, _message("one"), _message("two", status="incomplete"), _message("three")]

    chat = transform_response_from_responses(_response(output))

    assert len(chat["choices"]) == 3
    assert [c["index"] for c in chat["choices"]] == [0, 1, 2]
    assert all(c["message"]["reasoning"] == "Let me think" for c in chat["choices"])
    assert [c["finish_reason"] for c in chat["choices"]] == ["stop", "length", "stop"]


def test_response_function_call_only():
    output = [
        {
            "id": "fc_1",
            "type": "function_call",
            "call_id": "call_123",
            "name": "get_weather",
            "arguments": '{"city":"Paris"}',
        }
    ]

    chat = transform_response_from_responses(_response(output))

    assert len(chat["choices"]) == 1
    choice = chat["choices"][0]
    assert choice["finish_reason"] == "tool_calls"
    assert choice["message"]["role"] == "assistant"
    assert choice["message"]["content"] is None
    assert choice["message"]["tool_calls"] == [
        {
            "id": "call_123",
            "type": "function",
            "function": {"name": "get_weather", "arguments": '{"city":"Paris"}'},
        }
    ]


def test_response_function_call_defaults():
    output = [{"id": "fc_9", "type": "function_call", "name": "ping"}]

    chat = transform_response_from_responses(_response(output))

    tool_call = chat["choices"][0]["message"]["tool_calls"][0]
    assert tool_call["id"] == "fc_9"
    assert tool_call["function"]["arguments"] == "{}"


def test_response_tool_calls_force_null_content_on_messages():
    output = [
        _message("I'll call a tool"),
        {"id": "fc_1", "type": "function_call", "call_id": "c1", "name": "f", "arguments": "{}"},
    ]

    chat = transform_response_from_responses(_response(output))

    message = chat["choices"][0]["message"]
    assert message["content"] is None
    assert len(message["tool_calls"]) == 1
    assert chat["choices"][0]["finish_reason"] == "stop"


def test_response_empty_output():
    chat = transform_response_from_responses(_response([]))

    assert chat["choices"] == [
        {"index": 0, "message": {"role": "assistant", "content": ""}, "finish_reason": None}
    ]
    assert chat["usage"] == {}


def test_response_message_without_content():
    output = [{"id": "msg_1", "type": "message", "status": "completed"}]

    chat = transform_response_from_responses(_response(output))

    assert chat["choices"][0]["message"] == {"role": "assistant", "content": ""}
