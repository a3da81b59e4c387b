"""Contract every email adapter implements."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Deliver one message to one recipient.

        Adapters report delivery problems in the result instead of raising:
            {"message_id": str | None, "status": "sent" | "failed", "error": str}
        Callers still guard against unexpected exceptions.
        """
        ...
