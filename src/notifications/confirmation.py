"""Best-effort order confirmation email.

Runs after the create-order response has been sent. Every failure is logged
and swallowed here: the order is already persisted and the caller already has
its answer, so nothing is retried or surfaced.
"""

import structlog

from notifications.channel import get_email_channel
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


def send_order_confirmation(
    recipient: str,
    customer_name: str | None,
    order_id: str,
    total_price: float,
) -> bool:
    """Send the confirmation email. Returns whether delivery was reported as sent."""
    try:
        template = get_template("order_confirmation")
        content = template.render(
            {
                "order_id": order_id,
                "customer_name": customer_name,
                "total_price": total_price,
            }
        )
        result = get_email_channel().send(
            to=recipient,
            subject=content["subject"],
            body=content["body"],
            html_body=content.get("html_body"),
        )
    except Exception as exc:
        logger.error(
            "Failed to send order confirmation email",
            order_id=order_id,
            recipient=recipient,
            error=str(exc),
        )
        return False

    if result.get("status") != "sent":
        logger.error(
            "Order confirmation email was not delivered",
            order_id=order_id,
            recipient=recipient,
            error=result.get("error", "Unknown dispatch error"),
        )
        return False

    logger.info(
        "Order confirmation email sent",
        order_id=order_id,
        recipient=recipient,
        message_id=result.get("message_id"),
    )
    return True
