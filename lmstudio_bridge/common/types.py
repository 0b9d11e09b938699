"""
Wire Shapes

TypedDict declarations for the bodies exchanged with LM Studio. Bodies stay plain dicts at
runtime; these only document the keys the translator reads and writes.
"""

from __future__ import annotations

from typing import Any, Literal, NotRequired, Optional, TypedDict


ReasoningEffort = Literal["low", "medium", "high"]
OutputItemType = Literal["message", "reasoning", "function_call"]


class ChatToolCallFunction(TypedDict):
    name: str
    arguments: str


class ChatToolCall(TypedDict):
    id: str
    type: Literal["function"]
    function: ChatToolCallFunction


class ChatMessage(TypedDict):
    """Assistant message in a chat completion; content is None when tool_calls is set"""

    role: str
    content: Optional[str]
    reasoning: NotRequired[str]
    tool_calls: NotRequired[list[ChatToolCall]]


class ChatCompletionsRequestBody(TypedDict, total=False):
    model: str
    messages: list[dict[str, Any]]
    reasoning_effort: str
    user: str
    tools: list[Any]


class ResponsesReasoning(TypedDict):
    effort: str


class ResponsesAPIRequestBody(TypedDict, total=False):
    model: str
    input: str
    reasoning: ResponsesReasoning
    tools: list[Any]


class ResponsesAPIContent(TypedDict):
    type: Literal["output_text", "reasoning_text"]
    text: str


class ResponsesAPIOutput(TypedDict, total=False):
    id: str
    type: OutputItemType
    role: str
    status: str
    content: list[ResponsesAPIContent]
    summary: list[Any]
    call_id: str
    name: str
    arguments: str


class ResponsesAPIUsage(TypedDict, total=False):
    input_tokens: int
    output_tokens: int
    total_tokens: int
    output_tokens_details: dict[str, int]


class ResponsesAPIResponseBody(TypedDict, total=False):
    id: str
    object: str
    created_at: int
    status: str
    model: str
    output: list[ResponsesAPIOutput]
    usage: ResponsesAPIUsage
    previous_response_id: Optional[str]
