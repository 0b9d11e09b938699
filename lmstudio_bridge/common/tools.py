"""
Tool declaration helpers.

LM Studio rejects function tools whose `parameters` schema has no `type`, which some clients
omit. The responses endpoint additionally expects function tools in the flattened
`{type, name, description, parameters}` shape instead of the nested chat-completions one.
"""

from __future__ import annotations

from typing import Any


def ensure_tool_parameters_type(tools: list[Any]) -> list[Any]:
    """
    Add `type: "object"` to function tool parameters that lack a type.

    The parameters dict is updated in place, so other references to it see the change.
    Entries that are not function tools with a dict `parameters` are returned untouched.
    """
    return [_ensure_parameters_type(tool) for tool in tools]


def _ensure_parameters_type(tool: Any) -> Any:
    if not isinstance(tool, dict) or tool.get("type") != "function":
        return tool

    function = tool.get("function")
    if not isinstance(function, dict):
        return tool

    params = function.get("parameters")
    if isinstance(params, dict) and "type" not in params:
        params["type"] = "object"
    return tool


def flatten_function_tools(tools: list[Any]) -> list[Any]:
    """
    Convert chat-completions function tools into the responses-endpoint shape.

    `{"type": "function", "function": {"name": ..., "parameters": ...}}` becomes
    `{"type": "function", "name": ..., "parameters": ...}`.
    """
    out: list[Any] = []
    for tool in tools:
        if (
            isinstance(tool, dict)
            and tool.get("type") == "function"
            and isinstance(tool.get("function"), dict)
        ):
            out.append({"type": "function", **tool["function"]})
        else:
            out.append(tool)
    return out
