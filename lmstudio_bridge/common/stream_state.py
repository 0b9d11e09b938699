"""
Responses Stream State

Per-stream accumulator used while converting a `/v1/responses` SSE stream into
chat.completion.chunk objects. One instance lives for exactly one HTTP response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class OutputItemState:
    """An output item announced by `response.output_item.added`"""

    type: str
    # item_index -> accumulated text
    content_parts: dict[int, str] = field(default_factory=dict)


class StreamState:
    """
    Tracks response metadata and the text of every registered output item.

    Part and delta events for an output index that was never added are ignored.
    Chunk metadata is empty until `response.created` has been seen.
    """

    def __init__(self) -> None:
        self.response_id: str = ""
        self.response_created_at: int = 0
        self.response_model: str = ""
        self.current_role: str = "assistant"
        self.output_items: dict[int, OutputItemState] = {}

    def set_response_metadata(self, response_id: str, created_at: int, model: str) -> None:
        self.response_id = response_id
        self.response_created_at = created_at
        self.response_model = model

    def add_output_item(self, output_index: int, item_type: str, role: Optional[str] = None) -> None:
        if role:
            self.current_role = role
        self.output_items[output_index] = OutputItemState(type=item_type)

    def get_output_item(self, output_index: int) -> Optional[OutputItemState]:
        return self.output_items.get(output_index)

    def add_content_part(self, output_index: int, item_index: int, text: str) -> None:
        item = self.output_items.get(output_index)
        if item is not None:
            item.content_parts[item_index] = text

    def append_content_delta(self, output_index: int, item_index: int, delta_text: str) -> None:
        item = self.output_items.get(output_index)
        if item is not None:
            item.content_parts[item_index] = item.content_parts.get(item_index, "") + delta_text

    def accumulated_text(self, output_index: int) -> str:
        """Text of an output item so far, parts joined in item-index order"""
        item = self.output_items.get(output_index)
        if item is None:
            return ""
        return "".join(item.content_parts[i] for i in sorted(item.content_parts))

    def create_chat_chunk(
        self,
        content: Optional[str] = None,
        reasoning: Optional[str] = None,
        finish_reason: Optional[str] = None,
        include_role: bool = False,
    ) -> dict[str, Any]:
        """
        Build a chat.completion.chunk for choice 0.

        Only the delta fields that are set are included; `role` is sent on the first chunk.
        """
        delta: dict[str, Any] = {}
        if include_role:
            delta["role"] = self.current_role
        if content is not None:
            delta["content"] = content
        if reasoning is not None:
            delta["reasoning"] = reasoning

        return {
            "id": self.response_id,
            "object": "chat.completion.chunk",
            "created": self.response_created_at,
            "model": self.response_model,
            "choices": [
                {
                    "index": 0,
                    "delta": delta,
                    "finish_reason": finish_reason or None,
                }
            ],
        }
