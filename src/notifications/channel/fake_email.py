"""In-memory email channel used by default outside production."""

from itertools import count

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps delivered messages in ``sent_emails``; can be told to fail.

    Failed attempts never reach ``sent_emails``, so a test can assert that a
    confirmation was dropped rather than delivered.
    """

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.failed_attempts = 0
        self._ids = count(1)
        self.configure()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        raise_on_send: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_on_send = raise_on_send

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        if self.raise_on_send is not None:
            self.failed_attempts += 1
            raise self.raise_on_send

        if not self.should_succeed:
            self.failed_attempts += 1
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        # Shaped like the relay's Message-ID header
        message_id = f"<{next(self._ids)}.confirmation@storefront.test>"
        self.sent_emails.append(
            {"message_id": message_id, "to": to, "subject": subject, "body": body, "html_body": html_body}
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_emails.clear()
        self.failed_attempts = 0
        self.configure()
