"""
Test Configuration Module
"""

import json
from typing import Any

import pytest

from lmstudio_bridge.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from the caller's LM Studio environment"""
    for name in ("LMSTUDIO_API_BASE_URL", "LMSTUDIO_API_KEY", "DEBUG_LMSTUDIO", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def sse(*events: Any) -> bytes:
    """Encode events as a responses SSE body (dicts become JSON, strings are sent raw)"""
    out = []
    for event in events:
        if isinstance(event, dict):
            out.append(f"event: {event.get('type', 'message')}\ndata: {json.dumps(event)}\n\n")
        else:
            out.append(f"data: {event}\n\n")
    return "".join(out).encode("utf-8")


def parse_frames(body: bytes) -> list[Any]:
    """Decode chat SSE frames; `[DONE]` is kept as the literal string"""
    frames = []
    for block in body.decode("utf-8").split("\n\n"):
        if not block.strip():
            continue
        assert block.startswith("data: ")
        payload = block[len("data: "):]
        frames.append(payload if payload == "[DONE]" else json.loads(payload))
    return frames


@pytest.fixture
def make_sse():
    return sse


@pytest.fixture
def frames_of():
    return parse_frames
