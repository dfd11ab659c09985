"""NotificationStats: running delivery counts per merchant."""

import json

from notifications.domain import notifications
from notifications.notification.events import NotificationFailed, NotificationLogOpened, NotificationSent
from notifications.notification.notification import NotificationLog
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, Text
from protean.utils.globals import current_domain


@notifications.projection
class NotificationStats:
    merchant_id: Identifier(identifier=True, required=True)
    total: Integer(default=0)
    pending: Integer(default=0)
    sent: Integer(default=0)
    failed: Integer(default=0)
    by_type: Text()  # JSON object: notification_type -> count
    updated_at: DateTime()


@notifications.projector(projector_for=NotificationStats, aggregates=[NotificationLog])
class NotificationStatsProjector:
    def _load(self, merchant_id):
        repo = current_domain.repository_for(NotificationStats)
        try:
            return repo.get(str(merchant_id))
        except ObjectNotFoundError:
            return NotificationStats(
                merchant_id=str(merchant_id),
                total=0,
                pending=0,
                sent=0,
                failed=0,
                by_type=json.dumps({}),
            )

    @on(NotificationLogOpened)
    def on_log_opened(self, event: NotificationLogOpened):
        stats = self._load(event.merchant_id)
        by_type = json.loads(stats.by_type) if stats.by_type else {}
        by_type[event.notification_type] = by_type.get(event.notification_type, 0) + 1

        stats.total = stats.total + 1
        stats.pending = stats.pending + 1
        stats.by_type = json.dumps(by_type)
        stats.updated_at = event.created_at
        current_domain.repository_for(NotificationStats).add(stats)

    @on(NotificationSent)
    def on_notification_sent(self, event: NotificationSent):
        stats = self._load(event.merchant_id)
        stats.pending = max(stats.pending - 1, 0)
        stats.sent = stats.sent + 1
        stats.updated_at = event.sent_at
        current_domain.repository_for(NotificationStats).add(stats)

    @on(NotificationFailed)
    def on_notification_failed(self, event: NotificationFailed):
        stats = self._load(event.merchant_id)
        stats.pending = max(stats.pending - 1, 0)
        stats.failed = stats.failed + 1
        stats.updated_at = event.failed_at
        current_domain.repository_for(NotificationStats).add(stats)
