"""
Unit tests for the shared structured logging setup.
"""

import json
import logging
from datetime import datetime

import pytest

from shared.logging import (
    add_correlation_context,
    configure_logging,
    get_logger,
    product_group_var,
    reset_submission_context,
    set_submission_context,
    submission_id_var,
)


class TestStructuredLogging:
    """Test cases for the JSON log pipeline."""

    @pytest.fixture
    def log_entry(self, caplog):
        configure_logging("submission", "info")

        def _emit(event, **kwargs):
            with caplog.at_level(logging.INFO):
                get_logger("service_submission.tests").info(event, **kwargs)
            return json.loads(caplog.records[-1].getMessage())

        return _emit

    def test_timestamp_is_iso(self, log_entry):
        """Test each event carries a single ISO-8601 timestamp."""
        entry = log_entry("hello")

        assert isinstance(entry["timestamp"], str)
        datetime.fromisoformat(entry["timestamp"].replace("Z", "+00:00"))
        assert entry["event"] == "hello"
        assert entry["component"] == "service_submission"

    def test_correlation_fields(self, log_entry):
        """Test bound submission context shows up on events."""
        submission_id, tokens = set_submission_context(product_group="clothes")
        try:
            entry = log_entry("submitting")
        finally:
            reset_submission_context(tokens)

        assert entry["submission_id"] == submission_id
        assert entry["product_group"] == "clothes"


class TestSubmissionContext:
    """Test cases for binding and restoring correlation context."""

    def test_generates_submission_id(self):
        """Test an ID is generated when none is given."""
        submission_id, tokens = set_submission_context()
        try:
            assert submission_id
            assert submission_id_var.get() == submission_id
        finally:
            reset_submission_context(tokens)

    def test_reset_restores_outer_values(self):
        """Test nested contexts hand the outer values back on reset."""
        _, outer = set_submission_context("outer-id", "milk")
        try:
            _, inner = set_submission_context("inner-id", "shoes")
            assert add_correlation_context(None, "info", {}) == {
                "submission_id": "inner-id",
                "product_group": "shoes",
            }
            reset_submission_context(inner)

            assert submission_id_var.get() == "outer-id"
            assert product_group_var.get() == "milk"
        finally:
            reset_submission_context(outer)

        assert submission_id_var.get() is None
        assert product_group_var.get() is None
