"""
Adapters package for the Submission client.

Contains the HTTP transport for the CRPT registry. Adapters encapsulate:

- Base URL and request shape
- Authentication header
- Mapping of network and serialization faults to shared errors

Status codes are returned as-is; deciding what counts as success is the
client's concern.
"""

from .transport import HttpTransport, Transport

__all__ = [
    "HttpTransport",
    "Transport",
]
