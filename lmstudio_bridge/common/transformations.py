"""
Chat Completions <-> Responses body translation.

LM Studio's `/v1/responses` endpoint takes a single `input` string and returns typed output
items (reasoning / message / function_call). Callers of this package speak Chat Completions,
so request bodies are flattened on the way out and response bodies rebuilt on the way back.
"""

from __future__ import annotations

from typing import Any, Optional

from lmstudio_bridge.common.tools import ensure_tool_parameters_type, flatten_function_tools
from lmstudio_bridge.common.types import (
    ChatCompletionsRequestBody,
    ChatMessage,
    ChatToolCall,
    ResponsesAPIOutput,
    ResponsesAPIRequestBody,
    ResponsesAPIResponseBody,
)


# Fields consumed by the translation itself; everything else is forwarded verbatim.
_CONSUMED_REQUEST_KEYS = ("messages", "user", "reasoning_effort", "model", "tools")


def _message_text(message: Any) -> str:
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


def transform_request_for_responses(
    body: ChatCompletionsRequestBody, reasoning_effort: Optional[str] = None
) -> ResponsesAPIRequestBody:
    """
    Translate a `/v1/chat/completions` request body into a `/v1/responses` request body.

    Message roles are dropped: non-empty string contents are joined with a blank line into
    `input`. A `reasoning_effort` on the body wins over the `reasoning_effort` argument.
    """
    messages = body.get("messages")
    if not isinstance(messages, list):
        messages = []
    input_text = "\n\n".join(text for text in map(_message_text, messages) if text)

    transformed: ResponsesAPIRequestBody = {}
    if "model" in body:
        transformed["model"] = body["model"]
    transformed["input"] = input_text

    effort = body.get("reasoning_effort") or reasoning_effort
    if effort:
        transformed["reasoning"] = {"effort": effort}

    for key, value in body.items():
        if key not in _CONSUMED_REQUEST_KEYS:
            transformed[key] = value

    if "tools" in body:
        tools = body["tools"]
        if isinstance(tools, list):
            tools = flatten_function_tools(ensure_tool_parameters_type(tools))
        transformed["tools"] = tools

    return transformed


def _first_content_text(item: ResponsesAPIOutput, content_type: str) -> Optional[str]:
    content = item.get("content")
    if not isinstance(content, list):
        return None
    for entry in content:
        if isinstance(entry, dict) and entry.get("type") == content_type:
            text = entry.get("text")
            return text if isinstance(text, str) else None
    return None


def _to_tool_call(item: ResponsesAPIOutput) -> ChatToolCall:
    return {
        "id": item.get("call_id") or item.get("id"),
        "type": "function",
        "function": {
            "name": item.get("name"),
            "arguments": item.get("arguments") or "{}",
        },
    }


def transform_response_from_responses(data: ResponsesAPIResponseBody) -> dict[str, Any]:
    """
    Translate a non-streaming `/v1/responses` body into a chat completion.

    Every message item becomes a choice. Reasoning text and tool calls are repeated on each
    choice; when tool calls exist the choice content is None. With no message items a single
    assistant choice is produced so tool-only answers still reach the caller.

    `usage` is passed through untouched (input_tokens/output_tokens keep their names).
    """
    output = data.get("output")
    items = [o for o in output if isinstance(o, dict)] if isinstance(output, list) else []

    reasoning_item = next((o for o in items if o.get("type") == "reasoning"), None)
    message_items = [o for o in items if o.get("type") == "message"]
    function_calls = [o for o in items if o.get("type") == "function_call"]

    reasoning_text = (
        _first_content_text(reasoning_item, "reasoning_text") if reasoning_item else None
    )
    tool_calls = [_to_tool_call(call) for call in function_calls] or None

    choices: list[dict[str, Any]] = []
    if not message_items:
        message: ChatMessage = {
            "role": "assistant",
            "content": None if tool_calls else "",
        }
        if reasoning_text:
            message["reasoning"] = reasoning_text
        if tool_calls:
            message["tool_calls"] = tool_calls
        choices.append(
            {
                "index": 0,
                "message": message,
                "finish_reason": "tool_calls" if tool_calls else None,
            }
        )
    else:
        for index, item in enumerate(message_items):
            message = {
                "role": item.get("role") or "assistant",
                "content": _first_content_text(item, "output_text") or "",
            }
            if reasoning_text:
                message["reasoning"] = reasoning_text
            if tool_calls:
                message["content"] = None
                message["tool_calls"] = tool_calls
            choices.append(
                {
                    "index": index,
                    "message": message,
                    "finish_reason": "stop" if item.get("status") == "completed" else "length",
                }
            )

    usage = data.get("usage")
    return {
        "id": data.get("id"),
        "object": "chat.completion",
        "created": data.get("created_at"),
        "model": data.get("model"),
        "choices": choices,
        "usage": usage if usage is not None else {},
    }
