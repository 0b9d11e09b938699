"""
LM Studio provider module initialization
"""

from lmstudio_bridge.providers.base import ProviderResponse
from lmstudio_bridge.providers.lmstudio_client import (
    LMStudioClient,
    LMStudioModel,
    LMStudioProviderOptions,
    create_lmstudio,
    lmstudio,
    lmstudio_embedding,
)
from lmstudio_bridge.providers.responses_transport import (
    ResponsesTransport,
    SyncResponsesTransport,
)

__all__ = [
    "ProviderResponse",
    "LMStudioClient",
    "LMStudioModel",
    "LMStudioProviderOptions",
    "ResponsesTransport",
    "SyncResponsesTransport",
    "create_lmstudio",
    "lmstudio",
    "lmstudio_embedding",
]
