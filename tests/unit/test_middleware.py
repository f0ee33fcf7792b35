"""
Unit tests for logging and rate limit helpers.
"""
from unittest.mock import MagicMock

import pytest

from research_portal.middleware.logging import (
    add_correlation_id_processor,
    correlation_id,
    log_performance,
    redact_sensitive_data,
)
from research_portal.middleware.rate_limit import get_client_identifier


class TestRedaction:
    """Tests for sensitive field redaction."""

    def test_top_level(self):
        """Test API keys are redacted."""
        redacted = redact_sensitive_data({"openai_api_key": "sk-123", "model": "gpt-4o"})

        assert redacted == {"openai_api_key": "[REDACTED]", "model": "gpt-4o"}

    def test_nested(self):
        """Test document payloads inside nested structures are redacted."""
        event = {"request": {"parts": [{"file_data": "data:application/pdf;base64,AAAA"}]}}

        redacted = redact_sensitive_data(event)

        assert redacted["request"]["parts"][0]["file_data"] == "[REDACTED]"

    def test_non_dict_passthrough(self):
        """Test non-dict values are returned unchanged."""
        assert redact_sensitive_data("plain") == "plain"


class TestCorrelationProcessor:
    """Tests for the correlation ID processor."""

    def test_adds_current_id(self):
        """Test the processor stamps the current correlation ID."""
        token = correlation_id.set("req-42")
        try:
            event = add_correlation_id_processor(None, "info", {"event": "x"})
        finally:
            correlation_id.reset(token)

        assert event["correlation_id"] == "req-42"


class TestLogPerformance:
    """Tests for the log_performance decorator."""

    def test_sync_result(self):
        """Test sync functions keep their return value."""
        @log_performance("add")
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    @pytest.mark.asyncio
    async def test_async_error_propagates(self):
        """Test async failures are re-raised."""
        @log_performance("fail")
        async def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await fail()


class TestClientIdentifier:
    """Tests for the rate limit key."""

    def test_forwarded_for(self):
        """Test the first forwarded hop is used."""
        request = MagicMock()
        request.headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        assert get_client_identifier(request) == "203.0.113.7"

    def test_remote_address(self):
        """Test the socket address is used without proxies."""
        request = MagicMock()
        request.headers = {}
        request.client.host = "198.51.100.3"

        assert get_client_identifier(request) == "198.51.100.3"
