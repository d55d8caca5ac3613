"""
Document Submission package for the CRPT registry client.

The client submits "introduce goods" documents while enforcing:
- Rate limiting: at most N registry calls per rolling window, shared by
  all threads holding the same gate
- A single failure signal (SubmissionError) for cancelled waits, transport
  faults and unexpected response codes

Structure:
- app.client: SubmissionClient and the settings-driven factory.
- app.throttle: Sliding window throttle gate and cancellation tokens.
- app.adapters: HTTPS transport for the registry.
- app.domain: Document wire schema and product-group catalog.
"""

from .client import SubmissionClient, create_submission_client

__all__ = [
    "SubmissionClient",
    "create_submission_client",
]
