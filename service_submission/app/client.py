"""
Rate-limited document submission client.
"""

from contextlib import nullcontext
from typing import Callable, Optional

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from shared.config import SubmissionSettings, get_settings
from shared.errors import ConfigurationError, SubmissionError, TransportFailure, UnexpectedStatus
from shared.logging import configure_logging, get_logger, reset_submission_context, set_submission_context
from shared.metrics import MetricsCollector, get_metrics_collector
from .adapters.transport import HttpTransport, Transport
from .domain.schema import Document, DocumentCreateRequest, DocumentFormat, DocumentType, ProductGroup
from .throttle import CancellationToken, RateLimit, ThrottleGate, TimeUnit


tracer = trace.get_tracer(__name__)


class SubmissionClient:
    """Gates, assembles and dispatches document submissions.

    One gate may be shared by several clients; every ``submit`` call consumes
    one admission whether or not the registry accepts the document.
    """

    def __init__(
        self,
        gate: ThrottleGate,
        transport: Transport,
        *,
        document_format: DocumentFormat = DocumentFormat.MANUAL,
        document_type: DocumentType = DocumentType.LP_INTRODUCE_GOODS,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.gate = gate
        self.transport = transport
        self.document_format = document_format
        self.document_type = document_type
        self.metrics = metrics
        self.logger = get_logger("submission.client")

    def submit(
        self,
        product_group: ProductGroup,
        document: Document,
        signature: str,
        *,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Submit ``document`` for ``product_group``, waiting for a throttle slot first.

        Raises ThrottleCancelled, TransportFailure or UnexpectedStatus, all
        SubmissionError subclasses. Nothing is retried.
        """
        submission_id, context_tokens = set_submission_context(product_group=product_group.code)
        outcome = "error"
        timer = (
            self.metrics.time_operation("submission_duration_seconds", product_group=product_group.code)
            if self.metrics else nullcontext()
        )

        with timer, tracer.start_as_current_span("submission.submit") as span:
            span.set_attribute("submission.id", submission_id)
            span.set_attribute("submission.product_group", product_group.code)
            try:
                self.gate.acquire(cancel_token, timeout)

                request = self._build_request(document, signature)
                status_code = self.transport.create_document(product_group, request)
                span.set_attribute("http.status_code", status_code)

                if status_code != 200:
                    raise UnexpectedStatus(status_code, details={"product_group": product_group.code})

                outcome = "success"
                self.logger.info("Document submitted", doc_id=request.product_document.id)

            except SubmissionError as e:
                outcome = e.code.lower()
                if self.metrics:
                    self.metrics.record_error(e.code)
                self.logger.warning("Document submission failed", code=e.code, error=e.message)
                raise
            except Exception as e:
                if self.metrics:
                    self.metrics.record_error(type(e).__name__)
                self.logger.error("Document submission raised unexpectedly", error=str(e), error_type=type(e).__name__)
                raise
            finally:
                if self.metrics:
                    self.metrics.record_submission(product_group.code, outcome)
                reset_submission_context(context_tokens)

    def _build_request(self, document: Document, signature: str) -> DocumentCreateRequest:
        try:
            return DocumentCreateRequest(
                document_format=self.document_format,
                product_document=document,
                signature=signature,
                type=self.document_type,
            )
        except ValidationError as e:
            raise TransportFailure(
                f"Could not build document request: {e.error_count()} validation error(s)",
                details={"error_type": type(e).__name__}
            ) from e

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "SubmissionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def rate_limit_from_settings(settings: SubmissionSettings) -> RateLimit:
    """At most ``settings.request_limit`` calls per one ``settings.time_unit``."""
    try:
        return RateLimit.per(TimeUnit.from_name(settings.time_unit), settings.request_limit)
    except ValueError as e:
        raise ConfigurationError(str(e), details={"request_limit": settings.request_limit}) from e


def create_submission_client(
    settings: Optional[SubmissionSettings] = None,
    *,
    http_client: Optional[httpx.Client] = None,
    clock: Optional[Callable[[], float]] = None,
    metrics: Optional[MetricsCollector] = None,
) -> SubmissionClient:
    """Wire gate, transport and client from settings."""
    settings = settings or get_settings()
    configure_logging(settings.service_name, settings.log_level)

    rate_limit = rate_limit_from_settings(settings)

    if metrics is None:
        metrics = get_metrics_collector(settings.service_name)
        if settings.metrics_port:
            metrics.start_metrics_server(settings.metrics_port)

    gate = ThrottleGate(rate_limit, clock=clock, metrics=metrics)
    transport = HttpTransport(
        settings.base_url,
        settings.token.get_secret_value(),
        timeout=settings.request_timeout,
        client=http_client,
    )
    return SubmissionClient(gate, transport, metrics=metrics)
