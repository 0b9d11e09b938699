"""
Responses API httpx transport

Wraps another httpx transport so that a client speaking Chat Completions can be pointed at
LM Studio's `/v1/responses` endpoint. Requests are rewritten on the way out and responses
(JSON or SSE) are translated back before the client sees them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Iterator, Literal, Optional

import httpx

from lmstudio_bridge.common.event_router import (
    iter_transform_responses_stream,
    transform_responses_stream,
)
from lmstudio_bridge.common.proxy_headers import is_event_stream, rewrite_translated_headers
from lmstudio_bridge.common.sanitizer import sanitize_headers
from lmstudio_bridge.common.tools import ensure_tool_parameters_type
from lmstudio_bridge.common.transformations import (
    transform_request_for_responses,
    transform_response_from_responses,
)
from lmstudio_bridge.logging_config import is_debug_enabled

logger = logging.getLogger(__name__)

ApiMode = Literal["chat", "responses"]

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"
RESPONSES_SUFFIX = "/responses"


def _debug(message: str, data: Any = None) -> None:
    if is_debug_enabled():
        logger.debug(
            "%s %s",
            message,
            json.dumps(data, ensure_ascii=False, indent=2, default=str) if data is not None else "",
        )


def _load_json_object(content: bytes) -> Optional[dict[str, Any]]:
    try:
        body = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def _rebuild_request(request: httpx.Request, body: dict[str, Any], url: Optional[httpx.URL] = None) -> httpx.Request:
    headers = httpx.Headers(request.headers)
    # recomputed by httpx for the new content
    headers.pop("content-length", None)
    return httpx.Request(
        request.method,
        url or request.url,
        headers=headers,
        content=json.dumps(body, ensure_ascii=False).encode("utf-8"),
        extensions=request.extensions,
    )


def _is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


class _TransportBase:
    """Request/response rewriting shared by the async and sync transports"""

    def __init__(self, api: ApiMode = "chat", reasoning_effort: Optional[str] = None) -> None:
        self.api = api
        self.reasoning_effort = reasoning_effort

    def _responses_url(self, url: httpx.URL) -> Optional[httpx.URL]:
        """Target URL when the request must be translated, else None"""
        if self.api != "responses":
            return None
        path = url.path.rstrip("/")
        if path.endswith(CHAT_COMPLETIONS_SUFFIX):
            return url.copy_with(path=path[: -len(CHAT_COMPLETIONS_SUFFIX)] + RESPONSES_SUFFIX)
        if path.endswith(RESPONSES_SUFFIX):
            return url
        return None

    def _prepare_request(self, request: httpx.Request) -> tuple[httpx.Request, bool]:
        """
        Rewrite an outgoing request whose body has already been read.

        Returns:
            tuple[httpx.Request, bool]: (request to send, whether the response must be translated)
        """
        target_url = self._responses_url(request.url)
        body = _load_json_object(request.content) if request.content else None

        if target_url is not None and body is not None:
            _debug("Raw body from client:", body)
            transformed = transform_request_for_responses(body, self.reasoning_effort)
            _debug("Transformed request:", transformed)
            if is_debug_enabled():
                logger.debug(
                    "Responses request: url=%s headers=%s",
                    target_url,
                    sanitize_headers(request.headers),
                )
            return _rebuild_request(request, transformed, target_url), True

        if body is not None and isinstance(body.get("tools"), list):
            body["tools"] = ensure_tool_parameters_type(body["tools"])
            return _rebuild_request(request, body), False

        return request, False

    def _translated_json_response(self, response: httpx.Response) -> httpx.Response:
        data = _load_json_object(response.content)
        if data is None:
            logger.warning(
                "Responses endpoint returned a non-JSON body (status=%s), passing it through",
                response.status_code,
            )
            content = response.content
        else:
            _debug("Response usage:", data.get("usage"))
            content = json.dumps(transform_response_from_responses(data), ensure_ascii=False).encode("utf-8")

        return httpx.Response(
            status_code=response.status_code,
            headers=rewrite_translated_headers(response.headers),
            content=content,
            extensions=response.extensions,
        )


class TransformedResponseStream(httpx.AsyncByteStream):
    """Chat Completions SSE view over an upstream responses stream"""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for frame in transform_responses_stream(self._response.aiter_bytes()):
            yield frame

    async def aclose(self) -> None:
        await self._response.aclose()


class SyncTransformedResponseStream(httpx.SyncByteStream):
    """Synchronous counterpart of TransformedResponseStream"""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    def __iter__(self) -> Iterator[bytes]:
        yield from iter_transform_responses_stream(self._response.iter_bytes())

    def close(self) -> None:
        self._response.close()


class ResponsesTransport(_TransportBase, httpx.AsyncBaseTransport):
    """
    Async transport translating Chat Completions traffic to the Responses API.

    With api="chat" only the tool parameter fix is applied to outgoing bodies.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api: ApiMode = "chat",
        reasoning_effort: Optional[str] = None,
    ) -> None:
        super().__init__(api=api, reasoning_effort=reasoning_effort)
        self.wrapped = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        request, translate = self._prepare_request(request)

        response = await self.wrapped.handle_async_request(request)
        if not translate or not _is_success(response):
            return response

        if is_event_stream(response.headers):
            _debug("Handling streaming response")
            return httpx.Response(
                status_code=response.status_code,
                headers=rewrite_translated_headers(response.headers, streaming=True),
                stream=TransformedResponseStream(response),
                extensions=response.extensions,
            )

        await response.aread()
        return self._translated_json_response(response)

    async def aclose(self) -> None:
        await self.wrapped.aclose()


class SyncResponsesTransport(_TransportBase, httpx.BaseTransport):
    """Synchronous counterpart of ResponsesTransport, for httpx.Client"""

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        api: ApiMode = "chat",
        reasoning_effort: Optional[str] = None,
    ) -> None:
        super().__init__(api=api, reasoning_effort=reasoning_effort)
        self.wrapped = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        request.read()
        request, translate = self._prepare_request(request)

        response = self.wrapped.handle_request(request)
        if not translate or not _is_success(response):
            return response

        if is_event_stream(response.headers):
            _debug("Handling streaming response")
            return httpx.Response(
                status_code=response.status_code,
                headers=rewrite_translated_headers(response.headers, streaming=True),
                stream=SyncTransformedResponseStream(response),
                extensions=response.extensions,
            )

        response.read()
        return self._translated_json_response(response)

    def close(self) -> None:
        self.wrapped.close()
