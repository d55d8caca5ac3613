"""
Shared logging configuration for the CRPT submission client.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, Optional, Tuple
from contextvars import ContextVar, Token

from opentelemetry import trace

# Context variables for correlation IDs
submission_id_var: ContextVar[Optional[str]] = ContextVar('submission_id', default=None)
product_group_var: ContextVar[Optional[str]] = ContextVar('product_group', default=None)


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for the client."""

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_trace_context,
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Extract component name from logger name
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["component"] = logger_name.split(".")[0]

    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    submission_id = submission_id_var.get()
    if submission_id:
        event_dict["submission_id"] = submission_id

    product_group = product_group_var.get()
    if product_group:
        event_dict["product_group"] = product_group

    return event_dict


def set_submission_context(
    submission_id: Optional[str] = None,
    product_group: Optional[str] = None,
) -> Tuple[str, Tuple[Token, Token]]:
    """Bind a submission ID (generated when omitted) and product group to the current context.

    Returns the ID and the tokens to hand back to ``reset_submission_context``.
    """
    if submission_id is None:
        submission_id = str(uuid.uuid4())
    tokens = (submission_id_var.set(submission_id), product_group_var.set(product_group))
    return submission_id, tokens


def reset_submission_context(tokens: Tuple[Token, Token]) -> None:
    """Restore the context that was bound before ``set_submission_context``."""
    submission_token, product_group_token = tokens
    product_group_var.reset(product_group_token)
    submission_id_var.reset(submission_token)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
