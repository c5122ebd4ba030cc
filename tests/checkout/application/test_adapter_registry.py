"""Tests for environment-driven adapter selection."""

import pytest

from checkout.gateway import get_gateway, reset_gateway
from checkout.gateway.fake_adapter import FakeGateway
from checkout.gateway.stripe_adapter import StripeGateway
from checkout.notifier import get_email_channel, reset_email_channel
from checkout.notifier.fake_email import FakeEmailAdapter
from checkout.notifier.resend_email import ResendEmailAdapter


class TestGatewayRegistry:
    def test_fake_is_the_default(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        monkeypatch.setenv("FAKE_WEBHOOK_SECRET", "whsec_local")
        reset_gateway()

        gateway = get_gateway()
        assert isinstance(gateway, FakeGateway)
        assert gateway.webhook_secret == "whsec_local"
        assert get_gateway() is gateway

    def test_stripe_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_123")
        reset_gateway()

        gateway = get_gateway()
        assert isinstance(gateway, StripeGateway)
        assert gateway.signature_header == "Stripe-Signature"

    def test_stripe_without_keys_fails_fast(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        reset_gateway()

        with pytest.raises(ValueError):
            get_gateway()

    def test_unknown_gateway(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "paypal")
        reset_gateway()

        with pytest.raises(ValueError):
            get_gateway()


class TestEmailRegistry:
    def test_fake_is_the_default(self, monkeypatch):
        monkeypatch.delenv("EMAIL_ADAPTER", raising=False)
        reset_email_channel()
        assert isinstance(get_email_channel(), FakeEmailAdapter)

    def test_resend_from_environment(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        monkeypatch.setenv("RESEND_API_KEY", "re_test_123")
        monkeypatch.setenv("EMAIL_FROM", "Orders <orders@example.com>")
        reset_email_channel()

        channel = get_email_channel()
        assert isinstance(channel, ResendEmailAdapter)
        assert channel.api_key == "re_test_123"
        assert channel.sender == "Orders <orders@example.com>"

    def test_resend_without_key_fails_fast(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "resend")
        monkeypatch.delenv("RESEND_API_KEY", raising=False)
        reset_email_channel()

        with pytest.raises(ValueError):
            get_email_channel()

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "pigeon")
        reset_email_channel()

        with pytest.raises(ValueError):
            get_email_channel()
