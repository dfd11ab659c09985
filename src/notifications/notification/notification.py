"""NotificationLog aggregate (CQRS): one record per logical dispatch attempt.

Written as PENDING when a dispatch starts and completed exactly once when
every channel attempt has finished.

State Machine:
    PENDING → SENT
    PENDING → FAILED
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationFailed,
    NotificationLogOpened,
    NotificationSent,
)
from notifications.notification_types import NotificationType, PreferredChannel
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

TITLE_MAX_LENGTH = 255
URL_MAX_LENGTH = 500


class NotificationStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.SENT,
        NotificationStatus.FAILED,
    },
    NotificationStatus.SENT: set(),  # Terminal
    NotificationStatus.FAILED: set(),  # Terminal
}


def assert_can_transition(current_status: str, target_status: NotificationStatus) -> None:
    """Validate a delivery-log transition. Shared with PushNotificationLog."""
    current = NotificationStatus(current_status)
    if target_status not in _VALID_TRANSITIONS.get(current, set()):
        raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class NotificationLog:
    """Audit record of one dispatch to a merchant."""

    merchant_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=PreferredChannel, required=True)

    # Content
    title: String(max_length=TITLE_MAX_LENGTH, required=True)
    body: Text(required=True)
    url: String(max_length=URL_MAX_LENGTH)
    context_data: Text()  # JSON: caller-supplied metadata

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    sent_at: DateTime()
    error: Text()

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, merchant_id, notification_type, channel, title, body, url=None, context_data=None):
        """Start a dispatch attempt in PENDING status."""
        now = datetime.now(UTC)

        log = cls(
            merchant_id=merchant_id,
            notification_type=notification_type,
            channel=channel,
            title=title,
            body=body,
            url=url,
            context_data=context_data,
            status=NotificationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        log.raise_(
            NotificationLogOpened(
                notification_log_id=str(log.id),
                merchant_id=str(merchant_id),
                notification_type=notification_type,
                channel=channel,
                title=title,
                created_at=now,
            )
        )

        return log

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def mark_sent(self, sent_at=None):
        assert_can_transition(self.status, NotificationStatus.SENT)

        now = sent_at or datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_log_id=str(self.id),
                merchant_id=str(self.merchant_id),
                notification_type=self.notification_type,
                channel=self.channel,
                sent_at=now,
            )
        )

    def mark_failed(self, error):
        assert_can_transition(self.status, NotificationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.error = error
        self.updated_at = now

        self.raise_(
            NotificationFailed(
                notification_log_id=str(self.id),
                merchant_id=str(self.merchant_id),
                notification_type=self.notification_type,
                channel=self.channel,
                error=error,
                failed_at=now,
            )
        )

    @property
    def is_pending(self) -> bool:
        return NotificationStatus(self.status) == NotificationStatus.PENDING
