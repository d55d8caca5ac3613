"""
Test helper functions and factory methods for the CRPT submission client.
"""

import math
import threading
from datetime import date
from typing import List, Optional, Tuple

from service_submission.app.domain.schema import (
    Document,
    DocumentCreateRequest,
    DocumentDescription,
    Product,
    ProductGroup,
    ProductionType,
)
from service_submission.app.throttle import CancellationToken


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self.now_ms

    def advance(self, ms: float) -> None:
        with self._lock:
            self.now_ms += ms


class ClockAdvancingToken(CancellationToken):
    """Cancellation token whose waits move a FakeClock instead of sleeping."""

    def __init__(self, clock: FakeClock):
        super().__init__()
        self.clock = clock
        self.waits: List[Optional[float]] = []

    def wait(self, seconds: Optional[float]) -> bool:
        self.waits.append(seconds)
        if self.cancelled:
            return True
        if seconds is None:
            # An unbounded wait on a fake clock would never end
            self.cancel()
            return True
        # Whole milliseconds, rounded up, so the clock always passes the deadline
        self.clock.advance(math.ceil(seconds * 1000.0))
        return False


class RecordingTransport:
    """Transport stub returning a fixed status and recording every request."""

    def __init__(self, status_code: int = 200, error: Optional[Exception] = None):
        self.status_code = status_code
        self.error = error
        self.calls: List[Tuple[ProductGroup, DocumentCreateRequest]] = []
        self._lock = threading.Lock()
        self.closed = False

    def create_document(self, product_group: ProductGroup, request: DocumentCreateRequest) -> int:
        with self._lock:
            self.calls.append((product_group, request))
        if self.error is not None:
            raise self.error
        return self.status_code

    def close(self) -> None:
        self.closed = True


class TestDataFactory:
    """Factory for creating test data."""

    __test__ = False

    @staticmethod
    def create_product(**overrides) -> Product:
        """Create a product line item."""
        values = {
            "certificate_document": "CONFORMITY_CERTIFICATE",
            "certificate_document_date": date(2024, 1, 10),
            "certificate_document_number": "RU-C-77.AA00.B.00001",
            "owner_inn": "7700000001",
            "producer_inn": "7700000002",
            "production_date": date(2024, 1, 15),
            "tnved_code": "6109100000",
            "uit_code": "010460043993125621JgXJ5.T",
        }
        values.update(overrides)
        return Product(**values)

    @staticmethod
    def create_document(products: Optional[List[Product]] = None, **overrides) -> Document:
        """Create an "introduce goods" document."""
        values = {
            "description": DocumentDescription(participant_inn="7700000001"),
            "id": "doc-0001",
            "status": "DRAFT",
            "type": "LP_INTRODUCE_GOODS",
            "owner_inn": "7700000001",
            "participant_inn": "7700000001",
            "producer_inn": "7700000002",
            "production_date": date(2024, 1, 15),
            "production_type": ProductionType.OWN_PRODUCTION,
            "products": products if products is not None else [TestDataFactory.create_product()],
            "reg_date": date(2024, 1, 20),
            "reg_number": "REG-0001",
        }
        values.update(overrides)
        return Document(**values)
