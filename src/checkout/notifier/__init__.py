"""Email channel registry.

Provides singleton access to the email adapter selected by EMAIL_ADAPTER:
"fake" (default) records messages in memory, "resend" delivers through the
Resend API using RESEND_API_KEY and EMAIL_FROM.
"""

import os

from checkout.notifier.email_port import EmailPort

_email_channel: EmailPort | None = None


def _build_email_channel() -> EmailPort:
    name = os.environ.get("EMAIL_ADAPTER", "fake").lower()
    if name == "fake":
        from checkout.notifier.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    if name == "resend":
        from checkout.notifier.resend_email import ResendEmailAdapter

        api_key = (os.environ.get("RESEND_API_KEY") or "").strip()
        if not api_key:
            raise ValueError("RESEND_API_KEY must be set for the resend email adapter")
        return ResendEmailAdapter(
            api_key=api_key,
            sender=os.environ.get("EMAIL_FROM", "ShopCore <noreply@shopcore.local>"),
        )
    raise ValueError(f"Unknown email adapter: {name}")


def get_email_channel() -> EmailPort:
    global _email_channel
    if _email_channel is None:
        _email_channel = _build_email_channel()
    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    global _email_channel
    _email_channel = channel


def reset_email_channel() -> None:
    """Reset the email singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
