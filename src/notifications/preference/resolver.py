"""Preference resolver: should this merchant be alerted, and on which channel?

Order of checks:
1. Global kill switch for the type.
2. Merchant's per-type opt-in.
3. Merchant's quiet hours, unless the type is critical.

Reading preferences creates the merchant's default record when none exists.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from notifications.notification_types import (
    CRITICAL_TYPES,
    NotificationType,
    PreferredChannel,
    parse_notification_type,
)
from notifications.preference.preference import NotificationPreference
from notifications.settings.cache import get_global_settings
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

SUPPRESSED_GLOBALLY = "disabled_globally"
SUPPRESSED_BY_MERCHANT = "disabled_by_merchant"
SUPPRESSED_QUIET_HOURS = "quiet_hours"


@dataclass(frozen=True)
class DispatchDecision:
    can_send: bool
    channel: PreferredChannel
    suppressed_reason: str | None = None


def find_preference(merchant_id: str) -> NotificationPreference | None:
    repo = current_domain.repository_for(NotificationPreference)
    prefs = repo._dao.query.filter(merchant_id=str(merchant_id)).all().items
    return prefs[0] if prefs else None


def get_or_create_preference(merchant_id: str) -> NotificationPreference:
    """Return the merchant's preferences, creating defaults on first read."""
    preference = find_preference(merchant_id)
    if preference is None:
        preference = NotificationPreference.create_default(merchant_id=str(merchant_id))
        current_domain.repository_for(NotificationPreference).add(preference)
        logger.info("Default notification preferences created", merchant_id=str(merchant_id))
    return preference


def resolve(merchant_id: str, notification_type, now: datetime | None = None) -> DispatchDecision:
    """Decide whether ``notification_type`` may be sent to ``merchant_id`` right now."""
    notification_type: NotificationType = parse_notification_type(notification_type)
    now = now or datetime.now(UTC)

    if not get_global_settings().is_type_enabled(notification_type):
        return DispatchDecision(can_send=False, channel=PreferredChannel.BOTH, suppressed_reason=SUPPRESSED_GLOBALLY)

    preference = get_or_create_preference(merchant_id)
    channel = preference.channel

    if not preference.is_type_enabled(notification_type):
        return DispatchDecision(can_send=False, channel=channel, suppressed_reason=SUPPRESSED_BY_MERCHANT)

    if notification_type not in CRITICAL_TYPES and preference.is_quiet_at(now):
        return DispatchDecision(can_send=False, channel=channel, suppressed_reason=SUPPRESSED_QUIET_HOURS)

    return DispatchDecision(can_send=True, channel=channel)
