"""Notification type catalogue and the enum-keyed policy tables.

Every table below is keyed by ``NotificationType``. Adding a type means
adding it to each table; ``tests/notifications/domain/test_notification_types.py``
fails until all of them cover the new member.
"""

from enum import Enum


class NotificationType(Enum):
    NEW_ORDER = "new_order"
    NEW_MESSAGE = "new_message"
    APPOINTMENT = "appointment"
    ORDER_STATUS = "order_status"
    MISSED_MESSAGE = "missed_message"
    DISCONNECT_ALERT = "disconnect_alert"
    LOW_STOCK = "low_stock"
    WEEKLY_REPORT = "weekly_report"
    CUSTOM = "custom"


class PreferredChannel(Enum):
    """Channel selection stored on a merchant's preferences."""

    PUSH = "push"
    EMAIL = "email"
    BOTH = "both"

    def includes_push(self) -> bool:
        return self in (PreferredChannel.PUSH, PreferredChannel.BOTH)

    def includes_email(self) -> bool:
        return self in (PreferredChannel.EMAIL, PreferredChannel.BOTH)


class DeliveryChannel(Enum):
    """Concrete transport a single delivery attempt goes through."""

    PUSH = "push"
    EMAIL = "email"
    MESSAGING = "messaging"


# Per-merchant opt-in flag on NotificationPreference. ``None`` means the type
# has no merchant-level switch and is always merchant-enabled.
PREFERENCE_FLAGS: dict[NotificationType, str | None] = {
    NotificationType.NEW_ORDER: "new_order_enabled",
    NotificationType.NEW_MESSAGE: "new_message_enabled",
    NotificationType.APPOINTMENT: "appointment_enabled",
    NotificationType.ORDER_STATUS: "order_status_enabled",
    NotificationType.MISSED_MESSAGE: "missed_message_enabled",
    NotificationType.DISCONNECT_ALERT: "disconnect_alert_enabled",
    NotificationType.LOW_STOCK: "low_stock_enabled",
    NotificationType.WEEKLY_REPORT: None,
    NotificationType.CUSTOM: None,
}

# System-wide kill switch on GlobalNotificationSettings. ``None`` means the
# type cannot be switched off globally.
GLOBAL_FLAGS: dict[NotificationType, str | None] = {
    NotificationType.NEW_ORDER: "new_order_enabled",
    NotificationType.NEW_MESSAGE: "new_message_enabled",
    NotificationType.APPOINTMENT: "appointment_enabled",
    NotificationType.ORDER_STATUS: "order_status_enabled",
    NotificationType.MISSED_MESSAGE: "missed_message_enabled",
    NotificationType.DISCONNECT_ALERT: "disconnect_alert_enabled",
    NotificationType.LOW_STOCK: "low_stock_enabled",
    NotificationType.WEEKLY_REPORT: "weekly_report_enabled",
    NotificationType.CUSTOM: None,
}

# Whether quiet hours may hold back a type. Critical types always go out.
BYPASSES_QUIET_HOURS: dict[NotificationType, bool] = {
    NotificationType.NEW_ORDER: False,
    NotificationType.NEW_MESSAGE: False,
    NotificationType.APPOINTMENT: False,
    NotificationType.ORDER_STATUS: False,
    NotificationType.MISSED_MESSAGE: False,
    NotificationType.DISCONNECT_ALERT: True,
    NotificationType.LOW_STOCK: False,
    NotificationType.WEEKLY_REPORT: False,
    NotificationType.CUSTOM: False,
}

CRITICAL_TYPES: frozenset[NotificationType] = frozenset(t for t, critical in BYPASSES_QUIET_HOURS.items() if critical)


def parse_notification_type(value) -> NotificationType:
    """Coerce a string (or enum member) into a NotificationType.

    Raises ValueError for unknown types.
    """
    if isinstance(value, NotificationType):
        return value
    return NotificationType(value)
