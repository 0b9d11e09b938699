"""
LM Studio bridge: Chat Completions clients on top of LM Studio's chat or responses endpoint
"""

from lmstudio_bridge.providers import (
    LMStudioClient,
    LMStudioProviderOptions,
    ResponsesTransport,
    SyncResponsesTransport,
    create_lmstudio,
    lmstudio,
    lmstudio_embedding,
)

__version__ = "0.1.0"

__all__ = [
    "LMStudioClient",
    "LMStudioProviderOptions",
    "ResponsesTransport",
    "SyncResponsesTransport",
    "create_lmstudio",
    "lmstudio",
    "lmstudio_embedding",
]
