"""PushNotificationLog aggregate: one row per (subscription × notification) attempt.

Follows the NotificationLog lifecycle: PENDING → SENT | FAILED, never back.
"""

from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification.notification import (
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    NotificationStatus,
    assert_can_transition,
)
from notifications.push.events import PushDeliveryRecorded
from protean.fields import DateTime, Identifier, Integer, String, Text


@notifications.aggregate
class PushNotificationLog:
    merchant_id: Identifier(required=True)
    subscription_id: Identifier(required=True)
    notification_log_id: Identifier()

    title: String(max_length=TITLE_MAX_LENGTH, required=True)
    body: Text(required=True)
    url: String(max_length=URL_MAX_LENGTH)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    status_code: Integer()
    error: Text()
    sent_at: DateTime()

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def open(cls, merchant_id, subscription_id, title, body, url=None, notification_log_id=None):
        now = datetime.now(UTC)
        return cls(
            merchant_id=merchant_id,
            subscription_id=subscription_id,
            notification_log_id=notification_log_id,
            title=title,
            body=body,
            url=url,
            status=NotificationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

    def mark_sent(self, sent_at=None):
        assert_can_transition(self.status, NotificationStatus.SENT)
        now = sent_at or datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.updated_at = now
        self._record(now)

    def mark_failed(self, error, status_code=None):
        assert_can_transition(self.status, NotificationStatus.FAILED)
        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.error = error
        self.status_code = status_code
        self.updated_at = now
        self._record(now)

    def _record(self, now):
        self.raise_(
            PushDeliveryRecorded(
                push_log_id=str(self.id),
                subscription_id=str(self.subscription_id),
                notification_log_id=str(self.notification_log_id) if self.notification_log_id else None,
                merchant_id=str(self.merchant_id),
                status=self.status,
                status_code=self.status_code,
                error=self.error,
                recorded_at=now,
            )
        )
