"""Order confirmation template, sent once an order has been persisted."""

from html import escape


class OrderConfirmationTemplate:
    notification_type = "order_confirmation"

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        customer_name = context.get("customer_name") or "there"
        total_price = float(context.get("total_price", 0.0))
        return {
            "subject": f"Your Order Confirmation #{order_id}",
            "body": (
                f"Thank you for your order, {customer_name}!\n\n"
                "We've received your order and will begin processing it shortly.\n\n"
                f"Order ID: {order_id}\n"
                f"Total Amount: ${total_price:.2f}\n\n"
                "We will notify you again once your order has shipped."
            ),
            "html_body": (
                f"<h1>Thank you for your order, {escape(customer_name)}!</h1>"
                "<p>We've received your order and will begin processing it shortly.</p>"
                "<h2>Order Summary</h2>"
                f"<p><strong>Order ID:</strong> {escape(str(order_id))}</p>"
                f"<p><strong>Total Amount:</strong> ${total_price:.2f}</p>"
                "<p>We will notify you again once your order has shipped.</p>"
            ),
        }
