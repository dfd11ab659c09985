"""New order template: a customer placed an order."""

from notifications.notification_types import NotificationType


class NewOrderTemplate:
    notification_type = NotificationType.NEW_ORDER.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "")
        order_number = context.get("order_number") or order_id
        total = context.get("total_amount", 0)
        currency = context.get("currency", "SAR")
        return {
            "title": "New order received",
            "body": f"Order #{order_number} was placed for {total} {currency}.",
            "url": f"/merchant/orders/{order_id}",
        }
