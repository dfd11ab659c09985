"""Low stock template: a product hit its reorder threshold."""

from notifications.notification_types import NotificationType


class LowStockTemplate:
    notification_type = NotificationType.LOW_STOCK.value

    @staticmethod
    def render(context: dict) -> dict:
        product_name = context.get("product_name") or "A product"
        quantity = context.get("current_quantity", 0)
        threshold = context.get("threshold", 0)
        return {
            "title": "Low stock",
            "body": f"{product_name} is down to {quantity} units (threshold {threshold}).",
            "url": f"/merchant/products/{context.get('product_id', '')}",
        }
