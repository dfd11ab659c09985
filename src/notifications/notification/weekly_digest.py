"""Weekly digest: a short summary of the past week sent to every merchant.

Runs on the schedule held in the global settings (``weekly_report_day``,
``weekly_report_time``). The ``weekly_report_enabled`` switch stops the
whole run before any merchant is looked at. Each merchant's digest goes
through ``dispatch_notification``, so merchant channels and quiet hours
apply as for any other notification.
"""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta

import structlog
from notifications.directory import get_directory
from notifications.domain import notifications
from notifications.notification.dispatch import NotificationPayload, dispatch_notification
from notifications.notification.notification import NotificationLog
from notifications.notification_types import NotificationType
from notifications.settings.cache import get_global_settings
from notifications.templates import get_template
from protean.fields import DateTime
from protean.utils.mixins import handle
from reporting.metrics import get_metrics_source

logger = structlog.get_logger(__name__)

WEEK = timedelta(days=7)


@dataclass(frozen=True)
class WeeklyStats:
    merchant_id: str
    store_name: str | None
    orders: int
    revenue: float
    messages: int
    conversations: int
    new_customers: int
    appointments_booked: int


def collect_weekly_stats(merchant_id: str, now: datetime) -> WeeklyStats:
    """Stats for the seven days before ``now``."""
    source = get_metrics_source()
    merchant_id = str(merchant_id)
    since = now - WEEK

    orders = source.order_stats(merchant_id, since, now)
    conversations = source.conversation_stats(merchant_id, since, now)
    customers = source.customer_stats(merchant_id, since, now)
    activity = source.activity_stats(merchant_id, since, now)

    return WeeklyStats(
        merchant_id=merchant_id,
        store_name=source.store_name(merchant_id),
        orders=orders.total,
        revenue=orders.revenue,
        messages=activity.messages,
        conversations=conversations.total,
        new_customers=customers.total,
        appointments_booked=activity.appointments_booked,
    )


def send_weekly_digest(merchant_id: str, now: datetime | None = None) -> bool:
    """Build and dispatch one merchant's digest. Returns the dispatch result."""
    now = now or datetime.now(UTC)
    stats = asdict(collect_weekly_stats(merchant_id, now))
    rendered = get_template(NotificationType.WEEKLY_REPORT.value).render(stats)
    return dispatch_notification(
        NotificationPayload(
            merchant_id=str(merchant_id),
            notification_type=NotificationType.WEEKLY_REPORT,
            title=rendered["title"],
            body=rendered["body"],
            url=rendered.get("url"),
            metadata={"stats": stats},
        ),
        now=now,
    )


def send_weekly_digests(now: datetime | None = None) -> dict:
    """Send the digest to every merchant in the directory.

    Returns ``{"merchants", "sent", "failed"}``. A digest that was
    suppressed or raised counts as failed; one merchant's error never stops
    the run.
    """
    now = now or datetime.now(UTC)
    summary = {"merchants": 0, "sent": 0, "failed": 0}

    if not get_global_settings().is_type_enabled(NotificationType.WEEKLY_REPORT):
        logger.info("Weekly digests are disabled globally, skipping run")
        return summary

    merchant_ids = get_directory().list_merchant_ids()
    logger.info("Weekly digest run started", merchants=len(merchant_ids))

    for merchant_id in merchant_ids:
        summary["merchants"] += 1
        try:
            sent = send_weekly_digest(merchant_id, now)
        except Exception as exc:
            logger.error("Weekly digest failed", merchant_id=str(merchant_id), error=str(exc), exc_info=True)
            sent = False
        summary["sent" if sent else "failed"] += 1

    logger.info("Weekly digest run completed", **summary)
    return summary


@notifications.command(part_of="NotificationLog")
class SendWeeklyDigests:
    """Run the weekly digest for every merchant as of ``as_of`` (defaults to now)."""

    as_of: DateTime()


@notifications.command_handler(part_of=NotificationLog)
class WeeklyDigestHandler:
    @handle(SendWeeklyDigests)
    def send_all(self, command: SendWeeklyDigests) -> dict:
        return send_weekly_digests(command.as_of)
