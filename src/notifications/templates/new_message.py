"""New message template: a customer wrote to the merchant."""

from notifications.notification_types import NotificationType

PREVIEW_LENGTH = 120


class NewMessageTemplate:
    notification_type = NotificationType.NEW_MESSAGE.value

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name") or "a customer"
        preview = (context.get("preview") or "").strip()
        if len(preview) > PREVIEW_LENGTH:
            preview = preview[: PREVIEW_LENGTH - 1] + "…"
        return {
            "title": f"New message from {customer_name}",
            "body": preview or "You have a new message.",
            "url": "/merchant/conversations",
        }
