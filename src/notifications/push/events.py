"""Domain events for push subscriptions and per-subscription delivery logs."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Integer, String, Text


@notifications.event(part_of="PushSubscription")
class PushSubscriptionRegistered:
    """A browser or device registered to receive the merchant's push alerts."""

    __version__ = 1

    subscription_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    endpoint: Text(required=True)
    user_agent: String()
    registered_at: DateTime(required=True)


@notifications.event(part_of="PushSubscription")
class PushSubscriptionRefreshed:
    """A known endpoint registered again with fresh keys and was reactivated."""

    __version__ = 1

    subscription_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    previous_merchant_id: Identifier()  # set when the endpoint changed owner
    refreshed_at: DateTime(required=True)


@notifications.event(part_of="PushSubscription")
class PushSubscriptionDeactivated:
    """The push service reported the endpoint as gone; it is no longer targeted."""

    __version__ = 1

    subscription_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    reason: String(required=True)
    deactivated_at: DateTime(required=True)


@notifications.event(part_of="PushNotificationLog")
class PushDeliveryRecorded:
    """A single push attempt to one subscription finished."""

    __version__ = 1

    push_log_id: Identifier(required=True)
    subscription_id: Identifier(required=True)
    notification_log_id: Identifier()
    merchant_id: Identifier(required=True)
    status: String(required=True)
    status_code: Integer()
    error: Text()
    recorded_at: DateTime(required=True)
