"""
Responses SSE -> Chat Completions SSE

Routes each decoded `/v1/responses` stream event to the StreamState and decides which
chat.completion.chunk objects (if any) are emitted downstream.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Iterator, Optional

from lmstudio_bridge.common.errors import StreamParseError
from lmstudio_bridge.common.sse import DONE_FRAME, DONE_SENTINEL, SSELineDecoder, encode_sse_json
from lmstudio_bridge.common.stream_state import StreamState
from lmstudio_bridge.logging_config import is_debug_enabled

logger = logging.getLogger(__name__)


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _usage_chunk(response: dict[str, Any]) -> dict[str, Any]:
    usage = _dict(response.get("usage"))
    return {
        "id": response.get("id"),
        "object": "chat.completion.chunk",
        "created": response.get("created_at"),
        "model": response.get("model"),
        "choices": [],
        "usage": {
            "prompt_tokens": usage.get("input_tokens") or 0,
            "completion_tokens": usage.get("output_tokens") or 0,
            "total_tokens": usage.get("total_tokens") or 0,
        },
    }


def transform_responses_event(event: dict[str, Any], state: StreamState) -> list[dict[str, Any]]:
    """
    Apply one responses stream event to `state` and return the chunks to emit.

    Unknown event types return an empty list.
    """
    event_type = event.get("type")

    if event_type == "response.created":
        response = _dict(event.get("response"))
        state.set_response_metadata(
            response.get("id") or "",
            response.get("created_at") or 0,
            response.get("model") or "",
        )
        return [state.create_chat_chunk(include_role=True)]

    if event_type == "response.output_item.added":
        item = _dict(event.get("item"))
        state.add_output_item(event.get("output_index"), item.get("type"), _text(item.get("role")))
        return []

    if event_type == "response.content_part.added":
        text = _text(_dict(event.get("part")).get("text"))
        state.add_content_part(event.get("output_index"), event.get("item_index"), text or "")
        return []

    if event_type == "response.content_part.delta":
        text = _text(_dict(event.get("delta")).get("text"))
        if text is None:
            return []
        state.append_content_delta(event.get("output_index"), event.get("item_index"), text)

        item = state.get_output_item(event.get("output_index"))
        if item is None:
            return []
        if item.type == "message":
            return [state.create_chat_chunk(content=text)]
        if item.type == "reasoning":
            return [state.create_chat_chunk(reasoning=text)]
        return []

    if event_type == "response.reasoning_text.delta":
        text = _text(event.get("delta"))
        return [state.create_chat_chunk(reasoning=text)] if text is not None else []

    if event_type == "response.output_text.delta":
        text = _text(event.get("delta"))
        return [state.create_chat_chunk(content=text)] if text is not None else []

    if event_type in ("response.done", "response.completed"):
        chunks = [state.create_chat_chunk(finish_reason="stop")]
        response = _dict(event.get("response"))
        if isinstance(response.get("usage"), dict):
            chunks.append(_usage_chunk(response))
        return chunks

    # response.in_progress, response.output_item.done and anything newer
    return []


class ResponsesStreamTransformer:
    """
    Byte-level pipeline stage: raw responses SSE in, chat completions SSE frames out.

    Holds the line decoder and stream state of a single response.
    """

    def __init__(self) -> None:
        self._decoder = SSELineDecoder()
        self.state = StreamState()

    def feed(self, chunk: bytes) -> Iterator[bytes]:
        """
        Consume one upstream read and yield the frames to write downstream.

        Frames decoded before a bad line are still yielded.

        Raises:
            StreamParseError: a data frame is not valid JSON
        """
        for payload in self._decoder.feed(chunk):
            if payload == DONE_SENTINEL:
                yield DONE_FRAME
                continue

            try:
                event = json.loads(payload)
            except json.JSONDecodeError as e:
                error = StreamParseError(f"Failed to parse SSE event: {e}", details={"data": payload})
                logger.warning(
                    "Responses stream aborted: status=%s error=%s",
                    error.status_code,
                    json.dumps(error.to_dict(), ensure_ascii=False),
                )
                raise error from e

            if not isinstance(event, dict):
                continue

            if is_debug_enabled():
                logger.debug("Responses stream event: %s", event.get("type"))

            for chat_chunk in transform_responses_event(event, self.state):
                yield encode_sse_json(chat_chunk)


async def transform_responses_stream(upstream: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    """
    Convert a `/v1/responses` SSE byte stream into a Chat Completions SSE byte stream.

    Upstream is only read when the consumer pulls the next frame. A parse failure raises
    StreamParseError after the frames already produced have been yielded.
    """
    transformer = ResponsesStreamTransformer()
    async for chunk in upstream:
        for frame in transformer.feed(chunk):
            yield frame


def iter_transform_responses_stream(upstream: Iterator[bytes]) -> Iterator[bytes]:
    """Synchronous counterpart of transform_responses_stream"""
    transformer = ResponsesStreamTransformer()
    for chunk in upstream:
        yield from transformer.feed(chunk)
