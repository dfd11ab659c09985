"""Weekly report template: the merchant's week in two numbers."""

from notifications.notification_types import NotificationType


class WeeklyReportTemplate:
    notification_type = NotificationType.WEEKLY_REPORT.value

    @staticmethod
    def render(context: dict) -> dict:
        orders = int(context.get("orders") or 0)
        revenue = float(context.get("revenue") or 0)
        currency = context.get("currency", "SAR")
        noun = "order" if orders == 1 else "orders"
        return {
            "title": "Your weekly report is ready",
            "body": f"{orders} {noun}, {revenue:,.0f} {currency} revenue this week.",
            "url": "/merchant/dashboard",
        }
