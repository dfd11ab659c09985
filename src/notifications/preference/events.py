"""Domain events for the NotificationPreference aggregate."""

from notifications.domain import notifications
from protean.fields import Boolean, DateTime, Identifier, String, Text


@notifications.event(part_of="NotificationPreference")
class PreferencesCreated:
    """Default notification preferences were created for a merchant."""

    __version__ = 1

    preference_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    preferred_channel: String(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class PreferencesUpdated:
    """A merchant changed type flags, channel, batching or notification email."""

    __version__ = 1

    preference_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    changes: Text(required=True)  # JSON object of changed field -> new value
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class QuietHoursSet:
    """A merchant set and enabled their do-not-disturb window."""

    __version__ = 1

    preference_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    start: String(required=True)
    end: String(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class QuietHoursDisabled:
    """A merchant switched their do-not-disturb window off."""

    __version__ = 1

    preference_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    quiet_hours_enabled: Boolean(default=False)
    disabled_at: DateTime(required=True)
