"""
Protocol translation between Chat Completions and the Responses API
"""

from lmstudio_bridge.common.event_router import (
    ResponsesStreamTransformer,
    iter_transform_responses_stream,
    transform_responses_event,
    transform_responses_stream,
)
from lmstudio_bridge.common.stream_state import StreamState
from lmstudio_bridge.common.tools import ensure_tool_parameters_type, flatten_function_tools
from lmstudio_bridge.common.transformations import (
    transform_request_for_responses,
    transform_response_from_responses,
)

__all__ = [
    "ResponsesStreamTransformer",
    "StreamState",
    "ensure_tool_parameters_type",
    "flatten_function_tools",
    "iter_transform_responses_stream",
    "transform_request_for_responses",
    "transform_response_from_responses",
    "transform_responses_event",
    "transform_responses_stream",
]
