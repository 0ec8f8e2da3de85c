"""Tests for logging processors."""

from kenpos.config.logging import add_app_context, redact_sensitive


class TestProcessors:
    def test_redacts_payment_details(self):
        event = redact_sensitive(
            None,
            "info",
            {"event": "payment", "phone_number": "0712345678", "transaction_code": "QX12"},
        )
        assert event["phone_number"] == "***"
        assert event["transaction_code"] == "***"
        assert event["event"] == "payment"

    def test_leaves_empty_values(self):
        event = redact_sensitive(None, "info", {"event": "sync", "api_key": None})
        assert event["api_key"] is None

    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "x"})
        assert event["app"] == "KenPOS"
        assert event["environment"] == "development"
