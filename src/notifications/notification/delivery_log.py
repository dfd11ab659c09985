"""Delivery logger: persistence wrapper around NotificationLog.

``open_log`` writes the PENDING row when a dispatch starts;
``complete_log`` moves it to SENT or FAILED. Completing a row twice raises
ValidationError from the aggregate's state machine; repeated completion
calls are not deduplicated.
"""

import json

from notifications.notification.notification import NotificationLog
from protean.utils.globals import current_domain


def open_log(merchant_id, notification_type, channel, title, body, url=None, metadata=None) -> NotificationLog:
    log = NotificationLog.open(
        merchant_id=str(merchant_id),
        notification_type=notification_type,
        channel=channel,
        title=title,
        body=body,
        url=url,
        context_data=json.dumps(metadata, default=str) if metadata else None,
    )
    current_domain.repository_for(NotificationLog).add(log)
    return log


def complete_log(log: NotificationLog, success: bool, error: str | None = None) -> NotificationLog:
    if success:
        log.mark_sent()
    else:
        log.mark_failed(error or "Delivery failed")
    current_domain.repository_for(NotificationLog).add(log)
    return log
