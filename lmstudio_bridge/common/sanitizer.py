"""
Data Sanitization Module

Masks credentials in request headers before they are written to debug logs.
"""

from collections.abc import Mapping
from typing import Any


SENSITIVE_HEADERS = {"authorization", "x-api-key", "api-key"}


def sanitize_authorization(value: str) -> str:
    """
    Sanitize authorization field value

    Args:
        value: Original authorization value, e.g., "Bearer sk-xxxxxxxxxxxx"

    Returns:
        str: Sanitized value

    Examples:
        >>> sanitize_authorization("Bearer sk-1234567890abcdef")
        'Bearer sk-1***...***ef'
        >>> sanitize_authorization("Bearer secret")
        'Bearer ***'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.lower().startswith("bearer "):
        prefix = "Bearer "
        token = value[7:]

    # Too short to reveal anything
    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def sanitize_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    """
    Sanitize request headers (returns a new dict)

    Examples:
        >>> sanitize_headers({"authorization": "Bearer lm-studio", "accept": "*/*"})
        {'authorization': 'Bearer lm-s***...***io', 'accept': '*/*'}
    """
    if not headers:
        return {}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and isinstance(value, str):
            sanitized[key] = sanitize_authorization(value)
        else:
            sanitized[key] = value
    return sanitized
