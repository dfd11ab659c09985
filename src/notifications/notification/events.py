"""Domain events for the NotificationLog aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, String, Text


@notifications.event(part_of="NotificationLog")
class NotificationLogOpened:
    """A dispatch attempt started and its log row was written as pending."""

    __version__ = 1

    notification_log_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    title: String(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationLog")
class NotificationSent:
    """Every attempted channel delivered the notification."""

    __version__ = 1

    notification_log_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    sent_at: DateTime(required=True)


@notifications.event(part_of="NotificationLog")
class NotificationFailed:
    """At least one attempted channel failed to deliver the notification."""

    __version__ = 1

    notification_log_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    error: Text(required=True)
    failed_at: DateTime(required=True)
