"""Order confirmation notifier: sent once payment for an order is received."""

from checkout.errors import InternalError
from checkout.notifier import get_email_channel
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class OrderConfirmationTemplate:
    @staticmethod
    def render(order_view: dict) -> dict:
        order_id = order_view.get("order_id", "N/A")
        total = order_view.get("total", "0.00")
        status = order_view.get("status", "")
        items = "\n".join(
            f"  {line['quantity']} x {line['product_name']} @ {line['unit_price']}" for line in order_view.get("lines", [])
        )
        return {
            "subject": f"Order #{order_id} Confirmed",
            "body": (
                f"Thank you for your order!\n\n"
                f"Order ID: {order_id}\n"
                f"{items}\n\n"
                f"Total: ${total}\n"
                f"Status: {status}\n"
            ),
            "html_body": (
                "<h2>Thank you for your order!</h2>"
                f"<p>Order ID: {order_id}</p>"
                f"<p>Total: ${total}</p>"
                f"<p>Status: {status}</p>"
            ),
        }


class OrderConfirmationNotifier:
    def __init__(self, channel=None):
        self._channel = channel

    @property
    def channel(self):
        return self._channel or get_email_channel()

    def send_order_confirmation(self, email: str, order_view: dict) -> dict:
        """Render and send the confirmation. Raises InternalError when delivery fails."""
        content = OrderConfirmationTemplate.render(order_view)
        result = self.channel.send(
            to=email,
            subject=content["subject"],
            body=content["body"],
            html_body=content["html_body"],
        )
        if result.get("status") != "sent":
            logger.error(
                "order_confirmation_failed",
                order_id=order_view.get("order_id"),
                error=result.get("error"),
            )
            raise InternalError("Failed to send order confirmation email", order_id=order_view.get("order_id"))

        logger.info("order_confirmation_sent", order_id=order_view.get("order_id"), message_id=result.get("message_id"))
        return result
