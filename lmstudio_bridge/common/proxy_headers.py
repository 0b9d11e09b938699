"""
Response header utilities.

Translated responses carry a different body than the one LM Studio sent, so headers that
describe the original body framing cannot be copied as-is.
"""

from __future__ import annotations

import httpx


# Body framing / encoding headers that become invalid once the body is rewritten.
# httpx has already decoded any content-encoding by the time the body is translated.
_DROP_HEADERS = {
    "content-length",
    "content-encoding",
    "transfer-encoding",
}

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"


def is_event_stream(headers: httpx.Headers) -> bool:
    """Whether the response body is an SSE stream"""
    return EVENT_STREAM_CONTENT_TYPE in headers.get("content-type", "")


def rewrite_translated_headers(headers: httpx.Headers, streaming: bool = False) -> httpx.Headers:
    """
    Copy upstream headers for a translated body.

    Framing headers are dropped; for streams the content-type is forced to text/event-stream.
    """
    rewritten = httpx.Headers(
        [(key, value) for key, value in headers.multi_items() if key.lower() not in _DROP_HEADERS]
    )
    if streaming:
        rewritten["content-type"] = EVENT_STREAM_CONTENT_TYPE
    return rewritten
