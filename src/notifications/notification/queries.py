"""Read helpers for the notification log and push delivery history."""

from datetime import UTC, datetime

from notifications.notification.notification import NotificationLog
from notifications.push.push_log import PushNotificationLog
from protean.utils.globals import current_domain

DEFAULT_LIMIT = 50


def _newest_first(records):
    return sorted(records, key=lambda r: r.created_at or datetime.min.replace(tzinfo=UTC), reverse=True)


def list_notification_logs(merchant_id: str, notification_type=None, status=None, limit: int = DEFAULT_LIMIT):
    filters = {"merchant_id": str(merchant_id)}
    if notification_type:
        filters["notification_type"] = notification_type
    if status:
        filters["status"] = status

    repo = current_domain.repository_for(NotificationLog)
    return _newest_first(repo._dao.query.filter(**filters).all().items)[:limit]


def list_push_logs(notification_log_id: str):
    repo = current_domain.repository_for(PushNotificationLog)
    return _newest_first(repo._dao.query.filter(notification_log_id=str(notification_log_id)).all().items)
