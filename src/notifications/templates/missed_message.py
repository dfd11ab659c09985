"""Missed messages template: customer messages waiting for a reply."""

from notifications.notification_types import NotificationType


class MissedMessageTemplate:
    notification_type = NotificationType.MISSED_MESSAGE.value

    @staticmethod
    def render(context: dict) -> dict:
        count = int(context.get("missed_count", 0))
        noun = "message" if count == 1 else "messages"
        return {
            "title": "Unanswered messages",
            "body": f"You have {count} {noun} waiting for a reply.",
            "url": "/merchant/conversations",
        }
