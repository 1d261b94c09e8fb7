from fastapi import status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

MISSING_SNIPPETS_MESSAGE = "Both snippetA and snippetB are required"


class AEOCompareError(Exception):
    """Base exception for the snippet comparison service."""

    # Message shown to API callers; subclasses override where the internal
    # message must not leak.
    public_message: Optional[str] = None

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

        # Log the exception for monitoring
        logger.error(f"{self.__class__.__name__}: {message}", extra={"details": self.details})


class InvalidComparisonRequest(AEOCompareError):
    """Raised when the request body does not carry both snippets."""

    def __init__(self, missing: Optional[list] = None):
        details = {"missing_fields": missing or []}
        super().__init__(MISSING_SNIPPETS_MESSAGE, details)


class ConfigurationError(AEOCompareError):
    """Raised when application configuration is invalid."""

    def __init__(self, setting: str, reason: str, public_message: Optional[str] = None):
        message = f"Configuration error for '{setting}': {reason}"
        details = {"setting": setting, "reason": reason}
        self.public_message = public_message
        super().__init__(message, details)


class MissingAPIKeyError(ConfigurationError):
    """Raised when no OpenRouter credential is configured."""

    def __init__(self):
        super().__init__(
            "OPENROUTER_API_KEY",
            "no API key configured",
            public_message="Server missing API key (OPENROUTER_API_KEY)",
        )


class LLMProviderError(AEOCompareError):
    """Raised when LLM provider fails."""

    public_message = "AI service error"

    def __init__(self, provider: str, error_message: str, status_code: int = None):
        message = f"LLM provider '{provider}' failed: {error_message}"
        details = {
            "provider": provider,
            "original_error": error_message,
            "status_code": status_code
        }
        self.error_message = error_message
        self.status_code = status_code
        super().__init__(message, details)


def status_code_for(exc: AEOCompareError) -> int:
    """Map an exception to its HTTP status code."""
    if isinstance(exc, InvalidComparisonRequest):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(error: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


def to_error_response(exc: AEOCompareError) -> JSONResponse:
    """Convert a service exception to the JSON failure envelope."""
    if isinstance(exc, LLMProviderError):
        content = error_body(exc.public_message, exc.error_message)
    else:
        content = error_body(exc.public_message or exc.message)
    return JSONResponse(status_code=status_code_for(exc), content=content)
