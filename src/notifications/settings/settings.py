"""GlobalNotificationSettings aggregate: the platform-wide kill switch.

A single record (key ``"global"``) holding one enable flag per notification
type plus the weekly-report schedule. It is checked before any merchant
preference, so switching a type off here silences it for every merchant.
"""

import json
from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification_types import GLOBAL_FLAGS, parse_notification_type
from notifications.preference.quiet_hours import parse_time_of_day
from notifications.settings.events import GlobalSettingsCreated, GlobalSettingsUpdated
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

GLOBAL_SETTINGS_KEY = "global"
DEFAULT_WEEKLY_REPORT_DAY = 0  # Sunday
DEFAULT_WEEKLY_REPORT_TIME = "09:00"

_TYPE_FLAG_FIELDS = frozenset(flag for flag in GLOBAL_FLAGS.values() if flag)
_UPDATABLE_FIELDS = _TYPE_FLAG_FIELDS | {"weekly_report_day", "weekly_report_time"}


@notifications.aggregate
class GlobalNotificationSettings:
    settings_key: String(identifier=True, max_length=20)

    new_order_enabled: Boolean(default=True)
    new_message_enabled: Boolean(default=True)
    appointment_enabled: Boolean(default=True)
    order_status_enabled: Boolean(default=True)
    missed_message_enabled: Boolean(default=True)
    disconnect_alert_enabled: Boolean(default=True)
    low_stock_enabled: Boolean(default=True)
    weekly_report_enabled: Boolean(default=True)

    weekly_report_day: Integer(default=DEFAULT_WEEKLY_REPORT_DAY, min_value=0, max_value=6)
    weekly_report_time: String(max_length=5, default=DEFAULT_WEEKLY_REPORT_TIME)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create_default(cls):
        """Create the settings record with every type enabled."""
        now = datetime.now(UTC)
        settings = cls(
            settings_key=GLOBAL_SETTINGS_KEY,
            weekly_report_day=DEFAULT_WEEKLY_REPORT_DAY,
            weekly_report_time=DEFAULT_WEEKLY_REPORT_TIME,
            created_at=now,
            updated_at=now,
        )
        settings.raise_(GlobalSettingsCreated(settings_key=GLOBAL_SETTINGS_KEY, created_at=now))
        return settings

    def update(self, **changes):
        """Apply a partial update. Keys mapped to None are left unchanged."""
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError({"settings": ["At least one setting must be provided"]})

        unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({"settings": [f"Unknown settings fields: {', '.join(unknown)}"]})

        if "weekly_report_time" in changes:
            try:
                parse_time_of_day(changes["weekly_report_time"])
            except ValueError as exc:
                raise ValidationError({"weekly_report_time": [str(exc)]}) from None

        now = datetime.now(UTC)
        for field_name, value in changes.items():
            setattr(self, field_name, value)
        self.updated_at = now

        self.raise_(
            GlobalSettingsUpdated(
                settings_key=self.settings_key,
                changes=json.dumps(changes),
                updated_at=now,
            )
        )

    def is_type_enabled(self, notification_type) -> bool:
        flag = GLOBAL_FLAGS[parse_notification_type(notification_type)]
        return True if flag is None else bool(getattr(self, flag))
