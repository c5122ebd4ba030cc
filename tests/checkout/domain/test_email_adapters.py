"""Tests for the email adapters."""

from unittest.mock import patch

from checkout.notifier.fake_email import FakeEmailAdapter
from checkout.notifier.resend_email import ResendEmailAdapter


class TestFakeEmailAdapter:
    def test_records_sent_messages(self):
        adapter = FakeEmailAdapter()
        result = adapter.send("coltrane@example.com", "Hello", "Body")

        assert result["status"] == "sent"
        assert adapter.sent_emails[0]["to"] == "coltrane@example.com"

    def test_configured_failure(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False, failure_reason="Mailbox full")

        assert adapter.send("coltrane@example.com", "Hello", "Body") == {
            "message_id": None,
            "status": "failed",
            "error": "Mailbox full",
        }
        assert adapter.sent_emails == []


class TestResendEmailAdapter:
    def test_payload_sent_to_resend(self):
        adapter = ResendEmailAdapter(api_key="re_test_123", sender="Orders <orders@example.com>")
        with patch("resend.Emails.send", return_value={"id": "msg_001"}) as send:
            result = adapter.send("coltrane@example.com", "Order #1 Confirmed", "Total: $25.00", "<p>Order ID: 1</p>")

        assert result == {"message_id": "msg_001", "status": "sent"}
        send.assert_called_once_with(
            {
                "from": "Orders <orders@example.com>",
                "to": ["coltrane@example.com"],
                "subject": "Order #1 Confirmed",
                "text": "Total: $25.00",
                "html": "<p>Order ID: 1</p>",
            }
        )

    def test_plain_text_only(self):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        with patch("resend.Emails.send", return_value={"id": "msg_002"}) as send:
            adapter.send("coltrane@example.com", "Hello", "Body")

        assert "html" not in send.call_args.args[0]

    def test_provider_error_is_reported_as_failed(self):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        with patch("resend.Emails.send", side_effect=RuntimeError("connection reset")):
            result = adapter.send("coltrane@example.com", "Hello", "Body")

        assert result["status"] == "failed"
        assert result["error"] == "connection reset"

    def test_response_without_id_is_failed(self):
        adapter = ResendEmailAdapter(api_key="re_test_123")
        with patch("resend.Emails.send", return_value={"error": "invalid sender"}):
            result = adapter.send("coltrane@example.com", "Hello", "Body")

        assert result["message_id"] is None
        assert result["status"] == "failed"
