"""
Tests for structured logging setup and per-request context.
"""

import pytest
from structlog.contextvars import get_contextvars

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.logging import _service_name_processor, clear_context, set_request_id


class TestRequestContext:
    """Test cases for request-scoped log fields."""

    @pytest.fixture(autouse=True)
    def reset_context(self):
        clear_context()
        yield
        clear_context()

    def test_set_request_id_binds_given_id(self):
        assert set_request_id("req-abc") == "req-abc"
        assert get_contextvars()["request_id"] == "req-abc"

    def test_set_request_id_generates_id(self):
        """Without an inbound ID a UUID is generated and bound."""
        request_id = set_request_id()

        assert len(request_id) == 36
        assert get_contextvars()["request_id"] == request_id

    def test_clear_context(self):
        set_request_id("req-abc")

        clear_context()

        assert get_contextvars() == {}


class TestServiceNameProcessor:

    def test_adds_service_name(self):
        processor = _service_name_processor("gateway")

        assert processor(None, "info", {"event": "x"}) == {"event": "x", "service": "gateway"}

    def test_explicit_service_field_wins(self):
        processor = _service_name_processor("gateway")

        event = processor(None, "info", {"event": "x", "service": "postgrest"})

        assert event["service"] == "postgrest"
