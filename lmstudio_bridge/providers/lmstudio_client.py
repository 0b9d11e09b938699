"""
LM Studio Provider

Settings object and async client for an LM Studio server. Chat requests always go out in
Chat Completions form; with api="responses" the ResponsesTransport sends them to
`/v1/responses` and translates the answer back, so callers see the same shapes either way.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from lmstudio_bridge.common.errors import NoSuchModelError, StreamParseError, UpstreamError
from lmstudio_bridge.common.sanitizer import sanitize_headers
from lmstudio_bridge.common.sse import DONE_SENTINEL, SSELineDecoder
from lmstudio_bridge.common.types import ReasoningEffort
from lmstudio_bridge.config import get_settings
from lmstudio_bridge.providers.base import ProviderResponse
from lmstudio_bridge.providers.responses_transport import ResponsesTransport

logger = logging.getLogger(__name__)

PROVIDER_NAME = "lmstudio"


class LMStudioProviderOptions(BaseModel):
    """LM Studio provider options"""

    # Defaults to LMSTUDIO_API_BASE_URL, then http://localhost:1234/v1
    base_url: Optional[str] = Field(None, description="Base URL for the LM Studio API")
    # LM Studio typically doesn't require a key
    api_key: Optional[str] = Field(None, description="API key sent as a Bearer token")
    headers: dict[str, str] = Field(default_factory=dict, description="Custom request headers")
    api: Literal["chat", "responses"] = Field("chat", description="Backend endpoint for chat requests")
    reasoning_effort: Optional[ReasoningEffort] = Field(
        None, description="Default reasoning effort (responses API only)"
    )
    # Request timeout (seconds), defaults to HTTP_TIMEOUT
    timeout: Optional[int] = Field(None, gt=0)


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class LMStudioClient:
    """
    Asynchronous LM Studio client

    Wraps httpx.AsyncClient configured with the provider options and the responses transport.
    """

    def __init__(
        self,
        options: Optional[LMStudioProviderOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client

        Args:
            options: Provider options
            transport: Inner httpx transport (defaults to httpx.AsyncHTTPTransport)
        """
        settings = get_settings()
        self.options = options or LMStudioProviderOptions()
        self.base_url = self.options.base_url or settings.LMSTUDIO_API_BASE_URL
        self.api_key = self.options.api_key or settings.LMSTUDIO_API_KEY
        self.timeout = self.options.timeout or settings.HTTP_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def provider(self) -> str:
        return PROVIDER_NAME

    def get_headers(self) -> dict[str, str]:
        """Default request headers: Authorization plus custom headers (custom wins)"""
        headers = {"Authorization": f"Bearer {self.api_key}"}
        headers.update(self.options.headers)
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            transport = ResponsesTransport(
                self._transport,
                api=self.options.api,
                reasoning_effort=self.options.reasoning_effort,
            )
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self.get_headers(),
                transport=transport,
            )
            logger.debug(
                "LM Studio client created: base_url=%s api=%s headers=%s",
                self.base_url,
                self.options.api,
                sanitize_headers(self.get_headers()),
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP Client"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "LMStudioClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _post(self, path: str, body: dict[str, Any]) -> ProviderResponse:
        client = self._get_client()
        try:
            response = await client.post(path, json=body)
        except httpx.TimeoutException as e:
            return ProviderResponse(status_code=504, error=f"Request timeout: {str(e)}")
        except httpx.RequestError as e:
            return ProviderResponse(status_code=502, error=f"Request error: {str(e)}")

        provider_response = ProviderResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=_parse_body(response),
        )
        if not provider_response.is_success:
            provider_response.error = response.text
        if provider_response.is_server_error:
            logger.warning(
                "LM Studio server error: path=%s status=%s body=%s",
                path,
                response.status_code,
                response.text[:500],
            )
        return provider_response

    async def chat_completion(
        self, model: str, messages: list[dict[str, Any]], **params: Any
    ) -> ProviderResponse:
        """
        Non-streaming chat completion

        Args:
            model: Model ID loaded in LM Studio
            messages: Chat Completions messages
            **params: Other request fields (temperature, tools, reasoning_effort, ...)

        Returns:
            ProviderResponse: body is a chat.completion object on success
        """
        body = {"model": model, "messages": messages, **params}
        body.pop("stream", None)
        return await self._post("/chat/completions", body)

    async def stream_chat_completion(
        self, model: str, messages: list[dict[str, Any]], **params: Any
    ) -> AsyncIterator[dict[str, Any]]:
        """
        Streaming chat completion

        Yields:
            dict: chat.completion.chunk objects, until `[DONE]` or end of stream

        Raises:
            UpstreamError: LM Studio answered with a non-2xx status
            StreamParseError: a data frame is not valid JSON
        """
        body = {"model": model, "messages": messages, **params, "stream": True}
        client = self._get_client()
        async with client.stream("POST", "/chat/completions", json=body) as response:
            if not (200 <= response.status_code < 300):
                await response.aread()
                raise UpstreamError(
                    message=f"LM Studio returned status {response.status_code}",
                    details={"body": _parse_body(response)},
                    status_code=response.status_code,
                )

            decoder = SSELineDecoder()
            async for chunk in response.aiter_bytes():
                for payload in decoder.feed(chunk):
                    if payload == DONE_SENTINEL:
                        return
                    try:
                        chunk_obj = json.loads(payload)
                    except json.JSONDecodeError as e:
                        raise StreamParseError(
                            f"Failed to parse SSE event: {e}", details={"data": payload}
                        ) from e
                    yield chunk_obj

    async def embeddings(self, model: str, input: Any, **params: Any) -> ProviderResponse:
        """Embeddings are never translated; LM Studio serves them on /embeddings"""
        return await self._post("/embeddings", {"model": model, "input": input, **params})

    def language_model(self, model_id: str) -> "LMStudioModel":
        return LMStudioModel(client=self, model_id=model_id, model_type="languageModel")

    def text_embedding_model(self, model_id: str) -> "LMStudioModel":
        return LMStudioModel(client=self, model_id=model_id, model_type="textEmbeddingModel")

    def image_model(self, model_id: str) -> "LMStudioModel":
        raise NoSuchModelError(model_id=model_id, model_type="imageModel")

    def __call__(self, model_id: str) -> "LMStudioModel":
        return self.language_model(model_id)


@dataclass
class LMStudioModel:
    """A model ID bound to a client"""

    client: LMStudioClient
    model_id: str
    model_type: str

    @property
    def provider(self) -> str:
        return self.client.provider

    async def generate(self, messages: list[dict[str, Any]], **params: Any) -> ProviderResponse:
        return await self.client.chat_completion(self.model_id, messages, **params)

    def stream(self, messages: list[dict[str, Any]], **params: Any) -> AsyncIterator[dict[str, Any]]:
        return self.client.stream_chat_completion(self.model_id, messages, **params)

    async def embed(self, input: Any, **params: Any) -> ProviderResponse:
        return await self.client.embeddings(self.model_id, input, **params)


def create_lmstudio(
    options: Optional[LMStudioProviderOptions] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs: Any,
) -> LMStudioClient:
    """
    Create an LM Studio provider

    Args:
        options: Provider options; keyword arguments build one when omitted
        transport: Inner httpx transport
        **kwargs: LMStudioProviderOptions fields

    Returns:
        LMStudioClient: Configured client
    """
    if options is None:
        options = LMStudioProviderOptions(**kwargs)

    if options.reasoning_effort and options.api != "responses":
        logger.warning(
            "reasoning_effort is only supported with api='responses'; it will be ignored for api='%s'",
            options.api,
        )

    return LMStudioClient(options=options, transport=transport)


def lmstudio(model: str, **options: Any) -> LMStudioModel:
    """Create an LM Studio language model, e.g. lmstudio("qwen2.5-7b-instruct")"""
    return create_lmstudio(**options).language_model(model)


def lmstudio_embedding(model: str, **options: Any) -> LMStudioModel:
    """Create an LM Studio embedding model"""
    return create_lmstudio(**options).text_embedding_model(model)
