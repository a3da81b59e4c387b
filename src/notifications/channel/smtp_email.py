"""SMTP email adapter — sends order emails through an SMTP relay over SSL."""

import os
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from notifications.channel.email_port import EmailPort

DEFAULT_SENDER_NAME = "Shakthi Picture Framing"


class SmtpEmailAdapter(EmailPort):
    def __init__(
        self,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        sender: str,
        sender_name: str = DEFAULT_SENDER_NAME,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.sender_name = sender_name
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "SmtpEmailAdapter":
        return cls(
            host=os.environ.get("SMTP_HOST", "smtp-relay.brevo.com"),
            port=int(os.environ.get("SMTP_PORT", "465")),
            username=os.environ.get("SMTP_USER"),
            password=os.environ.get("SMTP_PASS"),
            sender=os.environ.get("SENDER_EMAIL", ""),
            timeout=float(os.environ.get("SMTP_TIMEOUT", "10")),
        )

    def _build_message(self, to, subject, body, html_body) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f'"{self.sender_name}" <{self.sender}>'
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        message = self._build_message(to, subject, body, html_body)
        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message["Message-ID"], "status": "sent"}
