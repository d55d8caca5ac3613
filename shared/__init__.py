"""
Shared utilities for the CRPT submission client.

This package aggregates common building blocks:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
