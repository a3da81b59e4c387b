"""Email channel registry — pluggable confirmation-email dispatch.

Uses the fake adapter by default; the SMTP adapter is selected with
EMAIL_ADAPTER=smtp in production.
"""

import os

from notifications.channel.email_port import EmailPort

_email_instance: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_instance
    if _email_instance is None:
        adapter = os.environ.get("EMAIL_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_instance = FakeEmailAdapter()
        elif adapter == "smtp":
            from notifications.channel.smtp_email import SmtpEmailAdapter

            _email_instance = SmtpEmailAdapter.from_env()
        else:
            raise ValueError(f"Unknown email adapter: {adapter}")
    return _email_instance


def set_email_channel(adapter: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _email_instance
    _email_instance = adapter


def reset_channels() -> None:
    """Reset the email adapter singleton (useful for testing)."""
    global _email_instance
    _email_instance = None
