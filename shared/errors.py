"""
Shared error handling for the CRPT submission client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error payload, suitable for logging or returning to callers."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class SubmissionLayerException(Exception):
    """Base exception for the submission client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(SubmissionLayerException):
    """Invalid client configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class SubmissionError(SubmissionLayerException):
    """Failure of a document submission. Every ``submit`` failure is one of these."""


class ThrottleCancelled(SubmissionError):
    """The admission wait was aborted before a slot was granted."""

    def __init__(self, reason: str = "cancelled", details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__(
            "THROTTLE_CANCELLED",
            f"Throttle wait aborted: {reason}",
            {"reason": reason, **(details or {})}
        )


class TransportFailure(SubmissionError):
    """Network or serialization fault below the HTTP status layer."""

    def __init__(self, message: str = "Transport failure", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_FAILURE", message, details)


class UnexpectedStatus(SubmissionError):
    """The registry answered with a status other than 200."""

    def __init__(self, status_code: int, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__(
            "UNEXPECTED_STATUS",
            f"Unexpected response code: {status_code}",
            {"status_code": status_code, **(details or {})}
        )
