"""Order status template: an order moved to a new status."""

from notifications.notification_types import NotificationType

STATUS_LABELS = {
    "pending": "Pending",
    "confirmed": "Confirmed",
    "processing": "Processing",
    "shipped": "Shipped",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
    "refunded": "Refunded",
}


class OrderStatusTemplate:
    notification_type = NotificationType.ORDER_STATUS.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "")
        order_number = context.get("order_number") or order_id
        new_status = context.get("new_status", "")
        label = STATUS_LABELS.get(new_status, new_status)
        return {
            "title": "Order status updated",
            "body": f"Order #{order_number} is now {label}.",
            "url": f"/merchant/orders/{order_id}",
        }
