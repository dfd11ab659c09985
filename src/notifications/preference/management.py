"""Preference management commands + handlers: update flags and quiet hours."""

from notifications.domain import notifications
from notifications.preference.preference import NotificationPreference
from notifications.preference.resolver import get_or_create_preference
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="NotificationPreference")
class UpdateNotificationPreferences:
    """Partially update a merchant's notification preferences."""

    merchant_id: Identifier(required=True)
    new_order_enabled: Boolean()
    new_message_enabled: Boolean()
    appointment_enabled: Boolean()
    order_status_enabled: Boolean()
    missed_message_enabled: Boolean()
    disconnect_alert_enabled: Boolean()
    low_stock_enabled: Boolean()
    preferred_channel: String(max_length=10)
    instant_notifications: Boolean()
    batching_enabled: Boolean()
    batch_interval_minutes: Integer(min_value=1)
    notification_email: String(max_length=255)


@notifications.command(part_of="NotificationPreference")
class SetQuietHours:
    """Set and enable a merchant's do-not-disturb window."""

    merchant_id: Identifier(required=True)
    start: String(required=True, max_length=5)
    end: String(required=True, max_length=5)


@notifications.command(part_of="NotificationPreference")
class DisableQuietHours:
    """Switch off a merchant's do-not-disturb window."""

    merchant_id: Identifier(required=True)


_PREFERENCE_FIELDS = (
    "new_order_enabled",
    "new_message_enabled",
    "appointment_enabled",
    "order_status_enabled",
    "missed_message_enabled",
    "disconnect_alert_enabled",
    "low_stock_enabled",
    "preferred_channel",
    "instant_notifications",
    "batching_enabled",
    "batch_interval_minutes",
    "notification_email",
)


@notifications.command_handler(part_of=NotificationPreference)
class ManagePreferencesHandler:
    @handle(UpdateNotificationPreferences)
    def update_preferences(self, command: UpdateNotificationPreferences):
        preference = get_or_create_preference(str(command.merchant_id))
        preference.update(**{name: getattr(command, name) for name in _PREFERENCE_FIELDS})
        current_domain.repository_for(NotificationPreference).add(preference)

    @handle(SetQuietHours)
    def set_quiet_hours(self, command: SetQuietHours):
        preference = get_or_create_preference(str(command.merchant_id))
        preference.set_quiet_hours(command.start, command.end)
        current_domain.repository_for(NotificationPreference).add(preference)

    @handle(DisableQuietHours)
    def disable_quiet_hours(self, command: DisableQuietHours):
        preference = get_or_create_preference(str(command.merchant_id))
        preference.disable_quiet_hours()
        current_domain.repository_for(NotificationPreference).add(preference)
