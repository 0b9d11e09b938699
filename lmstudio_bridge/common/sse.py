"""
SSE Line Decoding and Frame Encoding

Responses streams are read as raw bytes from httpx. Reads can end anywhere, including in the
middle of a line or of a multi-byte character, so text is reassembled line by line before any
payload is handed to the event router.
"""

from __future__ import annotations

import codecs
import json
from typing import Any


DONE_SENTINEL = "[DONE]"
DONE_FRAME = b"data: [DONE]\n\n"


class SSELineDecoder:
    """
    Line-oriented SSE decoder.

    - Decodes UTF-8 incrementally
    - Splits on \\n and keeps the last (possibly incomplete) line for the next feed
    - Skips blank lines and `event:` lines
    - Returns the payload of each `data: ` line
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buf = ""

    def feed(self, chunk: bytes) -> list[str]:
        """
        Append bytes and return the data payloads of every completed line.
        """
        if not chunk:
            return []

        self._buf += self._decoder.decode(chunk)
        lines = self._buf.split("\n")
        self._buf = lines.pop()

        payloads: list[str] = []
        for line in lines:
            payload = self._extract_data_payload(line)
            if payload is not None:
                payloads.append(payload)
        return payloads

    @staticmethod
    def _extract_data_payload(line: str) -> str | None:
        line = line.rstrip("\r")
        if not line.strip():
            return None
        if line.startswith("event:"):
            return None
        if line.startswith("data: "):
            return line[6:]
        return None


def encode_sse_json(obj: dict[str, Any]) -> bytes:
    """Serialize one chunk as a `data:` frame terminated by a blank line."""
    return f"data: {json.dumps(obj, ensure_ascii=False)}\n\n".encode("utf-8")
