"""
Provider Response Record

Result type returned by the LM Studio client for non-streaming calls.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ProviderResponse:
    """
    Provider Response Data Class

    Encapsulates response information from LM Studio.
    """

    # HTTP status code
    status_code: int
    # Response headers
    headers: dict[str, str] = field(default_factory=dict)
    # Response body (parsed JSON when possible, else text)
    body: Any = None
    # Error message
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Whether the response is successful"""
        return 200 <= self.status_code < 400

    @property
    def is_server_error(self) -> bool:
        """Whether it is a server error (status code >= 500)"""
        return self.status_code >= 500
