"""NotificationPreference aggregate (CQRS): per-merchant alert preferences.

One record per merchant: an opt-in flag per notification type, the preferred
channel, a quiet-hours window and batching settings. Created lazily with
defaults the first time preferences are read; never deleted, only switched
off through flags.
"""

import json
from datetime import UTC, datetime, time

from notifications.domain import notifications
from notifications.notification_types import (
    PREFERENCE_FLAGS,
    NotificationType,
    PreferredChannel,
    parse_notification_type,
)
from notifications.preference.events import (
    PreferencesCreated,
    PreferencesUpdated,
    QuietHoursDisabled,
    QuietHoursSet,
)
from notifications.preference.quiet_hours import is_within_quiet_hours, parse_time_of_day
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

DEFAULT_QUIET_HOURS_START = "22:00"
DEFAULT_QUIET_HOURS_END = "08:00"
DEFAULT_BATCH_INTERVAL_MINUTES = 30

_TYPE_FLAG_FIELDS = frozenset(flag for flag in PREFERENCE_FLAGS.values() if flag)
_UPDATABLE_FIELDS = _TYPE_FLAG_FIELDS | {
    "preferred_channel",
    "instant_notifications",
    "batching_enabled",
    "batch_interval_minutes",
    "notification_email",
}


@notifications.aggregate
class NotificationPreference:
    """A merchant's notification preferences.

    Batching fields are stored for the dashboard; the dispatcher sends
    instantly regardless.
    """

    merchant_id: Identifier(required=True, unique=True)

    # Per-type opt-in
    new_order_enabled: Boolean(default=True)
    new_message_enabled: Boolean(default=True)
    appointment_enabled: Boolean(default=True)
    order_status_enabled: Boolean(default=True)
    missed_message_enabled: Boolean(default=True)
    disconnect_alert_enabled: Boolean(default=True)
    low_stock_enabled: Boolean(default=True)

    preferred_channel: String(choices=PreferredChannel, default=PreferredChannel.BOTH.value)

    # Quiet hours (DND)
    quiet_hours_enabled: Boolean(default=False)
    quiet_hours_start: String(max_length=5, default=DEFAULT_QUIET_HOURS_START)
    quiet_hours_end: String(max_length=5, default=DEFAULT_QUIET_HOURS_END)

    # Batching
    instant_notifications: Boolean(default=True)
    batching_enabled: Boolean(default=False)
    batch_interval_minutes: Integer(default=DEFAULT_BATCH_INTERVAL_MINUTES, min_value=1)

    # Overrides the address held by the merchant directory
    notification_email: String(max_length=255)

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create_default(cls, merchant_id):
        """Create default preferences: every type on, both channels, quiet hours off."""
        now = datetime.now(UTC)

        preference = cls(
            merchant_id=merchant_id,
            preferred_channel=PreferredChannel.BOTH.value,
            quiet_hours_enabled=False,
            quiet_hours_start=DEFAULT_QUIET_HOURS_START,
            quiet_hours_end=DEFAULT_QUIET_HOURS_END,
            instant_notifications=True,
            batching_enabled=False,
            batch_interval_minutes=DEFAULT_BATCH_INTERVAL_MINUTES,
            created_at=now,
            updated_at=now,
        )

        preference.raise_(
            PreferencesCreated(
                preference_id=str(preference.id),
                merchant_id=str(merchant_id),
                preferred_channel=PreferredChannel.BOTH.value,
                created_at=now,
            )
        )

        return preference

    # -------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------
    def update(self, **changes):
        """Apply a partial update. Keys mapped to None are left unchanged."""
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError({"preferences": ["At least one preference must be provided"]})

        unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({"preferences": [f"Unknown preference fields: {', '.join(unknown)}"]})

        if "preferred_channel" in changes:
            try:
                PreferredChannel(changes["preferred_channel"])
            except ValueError:
                raise ValidationError(
                    {"preferred_channel": [f"Invalid channel: {changes['preferred_channel']}"]}
                ) from None

        now = datetime.now(UTC)
        for field_name, value in changes.items():
            setattr(self, field_name, value)
        self.updated_at = now

        self.raise_(
            PreferencesUpdated(
                preference_id=str(self.id),
                merchant_id=str(self.merchant_id),
                changes=json.dumps(changes),
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Quiet hours
    # -------------------------------------------------------------------
    def set_quiet_hours(self, start, end):
        """Set and enable the do-not-disturb window. Both bounds are HH:MM."""
        if not start or not end:
            raise ValidationError({"quiet_hours": ["Both start and end times are required"]})

        for label, value in [("start", start), ("end", end)]:
            try:
                parse_time_of_day(value)
            except ValueError as exc:
                raise ValidationError({f"quiet_hours_{label}": [str(exc)]}) from None

        now = datetime.now(UTC)
        self.quiet_hours_enabled = True
        self.quiet_hours_start = start
        self.quiet_hours_end = end
        self.updated_at = now

        self.raise_(
            QuietHoursSet(
                preference_id=str(self.id),
                merchant_id=str(self.merchant_id),
                start=start,
                end=end,
                updated_at=now,
            )
        )

    def disable_quiet_hours(self):
        """Switch the window off, keeping the stored bounds for later re-enabling."""
        now = datetime.now(UTC)
        self.quiet_hours_enabled = False
        self.updated_at = now

        self.raise_(
            QuietHoursDisabled(
                preference_id=str(self.id),
                merchant_id=str(self.merchant_id),
                disabled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------
    def is_type_enabled(self, notification_type) -> bool:
        flag = PREFERENCE_FLAGS[parse_notification_type(notification_type)]
        return True if flag is None else bool(getattr(self, flag))

    def is_quiet_at(self, now: datetime | time) -> bool:
        if not self.quiet_hours_enabled:
            return False
        return is_within_quiet_hours(self.quiet_hours_start, self.quiet_hours_end, now)

    @property
    def channel(self) -> PreferredChannel:
        return PreferredChannel(self.preferred_channel)

    def enabled_types(self) -> list[str]:
        return [t.value for t in NotificationType if self.is_type_enabled(t)]
