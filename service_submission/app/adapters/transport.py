"""
HTTPS transport for the CRPT registry.
"""

from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from shared.logging import get_logger
from shared.errors import TransportFailure
from ..domain.schema import DocumentCreateRequest, ProductGroup


CREATE_DOCUMENT_PATH = "/lk/documents/create"


class Transport(Protocol):
    """Sends a document create request and reports the HTTP status."""

    def create_document(self, product_group: ProductGroup, request: DocumentCreateRequest) -> int:
        ...


class HttpTransport:
    """httpx-backed transport for ``POST /lk/documents/create``."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self.logger = get_logger("submission.transport")

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

    def create_document(self, product_group: ProductGroup, request: DocumentCreateRequest) -> int:
        """POST the request for ``product_group`` and return the response status code."""
        url = f"{self.base_url}{CREATE_DOCUMENT_PATH}"

        try:
            body = request.to_json()
        except (ValidationError, TypeError, ValueError) as e:
            self.logger.error("Document serialization failed", error=str(e))
            raise TransportFailure(
                f"Could not serialize document: {e}",
                details={"error_type": type(e).__name__}
            ) from e

        try:
            # URL and header encoding happen while building the request
            http_request = self._client.build_request(
                "POST",
                url,
                params={"pg": product_group.code},
                content=body,
                headers=self._headers(),
            )
            response = self._client.send(http_request)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            self.logger.error("Registry HTTP error", error=str(e), url=url)
            raise TransportFailure(
                f"Registry unavailable: {e}",
                details={"error_type": type(e).__name__, "url": url}
            ) from e

        self.logger.debug(
            "Registry responded",
            status_code=response.status_code,
            product_group=product_group.code
        )
        return response.status_code

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
