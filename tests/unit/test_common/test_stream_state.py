from lmstudio_bridge.common.stream_state import StreamState


def test_chunk_before_created_has_empty_metadata():
    state = StreamState()

    chunk = state.create_chat_chunk(content="early")

    assert chunk == {
        "id": "",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "",
        "choices": [{"index": 0, "delta": {"content": "early"}, "finish_reason": None}],
    }


def test_role_chunk_uses_current_role():
    state = StreamState()
    state.set_response_metadata("resp_1", 123, "gpt-oss")
    state.add_output_item(0, "message", role="developer")

    chunk = state.create_chat_chunk(include_role=True)

    assert chunk["id"] == "resp_1"
    assert chunk["created"] == 123
    assert chunk["model"] == "gpt-oss"
    assert chunk["choices"][0]["delta"] == {"role": "developer"}


def test_add_output_item_without_role_keeps_previous_role():
    state = StreamState()
    state.add_output_item(0, "reasoning")

    assert state.current_role == "assistant"


def test_content_parts_accumulate():
    state = StreamState()
    state.add_output_item(0, "message")
    state.add_content_part(0, 1, "world")
    state.add_content_part(0, 0, "Hel")
    state.append_content_delta(0, 0, "lo ")

    assert state.get_output_item(0).content_parts == {0: "Hello ", 1: "world"}
    assert state.accumulated_text(0) == "Hello world"


def test_unregistered_index_is_ignored():
    state = StreamState()
    state.add_content_part(3, 0, "x")
    state.append_content_delta(3, 0, "y")

    assert state.get_output_item(3) is None
    assert state.accumulated_text(3) == ""
    assert state.output_items == {}


def test_delta_without_part_starts_from_empty():
    state = StreamState()
    state.add_output_item(1, "reasoning")
    state.append_content_delta(1, 0, "think")

    assert state.accumulated_text(1) == "think"


def test_finish_chunk():
    chunk = StreamState().create_chat_chunk(finish_reason="stop")

    assert chunk["choices"][0] == {"index": 0, "delta": {}, "finish_reason": "stop"}
