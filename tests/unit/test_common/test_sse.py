from lmstudio_bridge.common.sse import SSELineDecoder, encode_sse_json


def test_decoder_returns_data_payloads_and_skips_event_lines():
    decoder = SSELineDecoder()

    payloads = decoder.feed(b'event: response.created\ndata: {"a":1}\n\ndata: [DONE]\n\n')

    assert payloads == ['{"a":1}', "[DONE]"]


def test_decoder_keeps_incomplete_last_line():
    decoder = SSELineDecoder()

    assert decoder.feed(b'data: {"type":"resp') == []
    assert decoder.feed(b'onse.created"}') == []
    assert decoder.feed(b"\n\n") == ['{"type":"response.created"}']


def test_decoder_handles_split_multibyte_character():
    decoder = SSELineDecoder()
    raw = 'data: {"delta":"héllo"}\n'.encode("utf-8")
    split_at = raw.index(b"\xc3") + 1

    assert decoder.feed(raw[:split_at]) == []
    assert decoder.feed(raw[split_at:]) == ['{"delta":"héllo"}']


def test_decoder_supports_crlf_and_ignores_other_fields():
    decoder = SSELineDecoder()

    payloads = decoder.feed(b'id: 7\r\nretry: 100\r\n: comment\r\ndata: {"x":2}\r\n\r\n')

    assert payloads == ['{"x":2}']


def test_decoder_empty_chunk():
    assert SSELineDecoder().feed(b"") == []


def test_encode_sse_json():
    assert encode_sse_json({"content": "é"}) == 'data: {"content": "é"}\n\n'.encode("utf-8")
