"""
Error Definitions

Defines the exception classes raised by the bridge. Most malformed input is tolerated
and passed through; only the conditions below are surfaced to the caller.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Bridge Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code associated with the failure
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format (OpenAI-style error body)

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class StreamParseError(AppError):
    """
    SSE Frame Parse Error

    Raised when a `data:` frame of a responses stream is not valid JSON. The transformed
    stream ends with this error instead of silently dropping the event.
    """

    def __init__(
        self,
        message: str = "Failed to parse SSE event",
        code: str = "invalid_sse_event",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="stream_error",
            code=code,
            details=details,
            status_code=502,
        )


class NoSuchModelError(AppError):
    """
    Unsupported Model Kind

    Raised when the provider is asked for a model kind LM Studio does not serve.
    """

    def __init__(
        self,
        model_id: str,
        model_type: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"No such {model_type}: {model_id}",
            error_type="not_found_error",
            code="no_such_model",
            details=details,
            status_code=404,
        )
        self.model_id = model_id
        self.model_type = model_type


class UpstreamError(AppError):
    """
    Upstream Service Error

    Raised when LM Studio answers a streaming request with a non-2xx status.
    """

    def __init__(
        self,
        message: str = "Upstream service error",
        code: str = "upstream_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            error_type="upstream_error",
            code=code,
            details=details,
            status_code=status_code,
        )
