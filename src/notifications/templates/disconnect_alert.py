"""Disconnect alert template: the messaging channel went offline.

Critical: delivered even during quiet hours.
"""

from notifications.notification_types import NotificationType


class DisconnectAlertTemplate:
    notification_type = NotificationType.DISCONNECT_ALERT.value

    @staticmethod
    def render(context: dict) -> dict:
        channel_name = context.get("channel_name") or "WhatsApp"
        return {
            "title": f"{channel_name} disconnected",
            "body": (
                f"Your {channel_name} account was unlinked. "
                "Reconnect it as soon as possible so customers keep getting replies."
            ),
            "url": "/merchant/whatsapp",
        }
