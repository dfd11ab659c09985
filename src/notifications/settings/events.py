"""Domain events for the GlobalNotificationSettings aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, String, Text


@notifications.event(part_of="GlobalNotificationSettings")
class GlobalSettingsCreated:
    """The platform-wide settings record was created with defaults."""

    __version__ = 1

    settings_key: String(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="GlobalNotificationSettings")
class GlobalSettingsUpdated:
    """An operator changed platform-wide notification settings."""

    __version__ = 1

    settings_key: String(required=True)
    changes: Text(required=True)  # JSON object of changed field -> new value
    updated_at: DateTime(required=True)
