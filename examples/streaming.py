#!/usr/bin/env python3
"""
Streaming Examples

Streams a chat completion from a local LM Studio server, once through the chat endpoint
and once through the responses endpoint with reasoning enabled.

Requires LM Studio listening on LMSTUDIO_API_BASE_URL (default http://localhost:1234/v1).
"""

import asyncio
import sys

from lmstudio_bridge import create_lmstudio
from lmstudio_bridge.logging_config import setup_logging


async def stream_once(api: str, model: str, prompt: str) -> None:
    print("\n" + "#" * 70)
    print(f"# api={api}")
    print("#" * 70)

    options = {"api": api}
    if api == "responses":
        options["reasoning_effort"] = "low"

    async with create_lmstudio(**options) as provider:
        async for chunk in provider(model).stream([{"role": "user", "content": prompt}]):
            if chunk.get("usage"):
                print(f"\n  usage: {chunk['usage']}")
            for choice in chunk.get("choices", []):
                delta = choice.get("delta", {})
                if delta.get("reasoning"):
                    print(f"\033[2m{delta['reasoning']}\033[0m", end="", flush=True)
                if delta.get("content"):
                    print(delta["content"], end="", flush=True)
    print()


async def main() -> None:
    setup_logging()
    model = sys.argv[1] if len(sys.argv) > 1 else "openai/gpt-oss-20b"
    prompt = "Write a haiku about local models."

    await stream_once("chat", model, prompt)
    await stream_once("responses", model, prompt)


if __name__ == "__main__":
    asyncio.run(main())
