"""UpdateGlobalSettings command + handler."""

from notifications.domain import notifications
from notifications.settings.cache import invalidate_global_settings, load_or_create_global_settings
from notifications.settings.settings import GlobalNotificationSettings
from protean.fields import Boolean, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

_SETTING_FIELDS = (
    "new_order_enabled",
    "new_message_enabled",
    "appointment_enabled",
    "order_status_enabled",
    "missed_message_enabled",
    "disconnect_alert_enabled",
    "low_stock_enabled",
    "weekly_report_enabled",
    "weekly_report_day",
    "weekly_report_time",
)


@notifications.command(part_of="GlobalNotificationSettings")
class UpdateGlobalSettings:
    """Change platform-wide type switches or the weekly report schedule."""

    new_order_enabled: Boolean()
    new_message_enabled: Boolean()
    appointment_enabled: Boolean()
    order_status_enabled: Boolean()
    missed_message_enabled: Boolean()
    disconnect_alert_enabled: Boolean()
    low_stock_enabled: Boolean()
    weekly_report_enabled: Boolean()
    weekly_report_day: Integer(min_value=0, max_value=6)
    weekly_report_time: String(max_length=5)


@notifications.command_handler(part_of=GlobalNotificationSettings)
class GlobalSettingsHandler:
    @handle(UpdateGlobalSettings)
    def update_settings(self, command: UpdateGlobalSettings):
        settings = load_or_create_global_settings()
        settings.update(**{name: getattr(command, name) for name in _SETTING_FIELDS})
        current_domain.repository_for(GlobalNotificationSettings).add(settings)
        invalidate_global_settings()
