"""Push fan-out: deliver one message to every active subscription of a merchant.

Each subscription gets its own attempt and its own PushNotificationLog row.
A "gone" answer deactivates the subscription. The fan-out succeeds when at
least one attempt succeeded, or when the merchant has no active
subscriptions at all.

Attempts run one after another in subscription order, inside the
caller's unit of work. Nothing is sent concurrently.
"""

from dataclasses import dataclass, field

import structlog
from notifications.channel import get_channel
from notifications.channel.push_port import STATUS_GONE, STATUS_SENT, PushMessage
from notifications.notification_types import DeliveryChannel
from notifications.push.push_log import PushNotificationLog
from notifications.push.subscription import PushSubscription
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


@dataclass
class PushFanoutResult:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    deactivated: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.attempted == 0 or self.succeeded > 0


def active_subscriptions(merchant_id: str) -> list[PushSubscription]:
    repo = current_domain.repository_for(PushSubscription)
    return repo._dao.query.filter(merchant_id=str(merchant_id), is_active=True).all().items


def deliver_push(merchant_id: str, message: PushMessage, notification_log_id: str | None = None) -> PushFanoutResult:
    """Send ``message`` to each active subscription of ``merchant_id``."""
    result = PushFanoutResult()
    subscriptions = active_subscriptions(merchant_id)
    if not subscriptions:
        logger.info("No active push subscriptions", merchant_id=str(merchant_id))
        return result

    adapter = get_channel(DeliveryChannel.PUSH)
    log_repo = current_domain.repository_for(PushNotificationLog)
    subscription_repo = current_domain.repository_for(PushSubscription)

    for subscription in subscriptions:
        result.attempted += 1
        push_log = PushNotificationLog.open(
            merchant_id=str(merchant_id),
            subscription_id=str(subscription.id),
            notification_log_id=notification_log_id,
            title=message.title,
            body=message.body,
            url=message.url,
        )

        try:
            outcome = adapter.send(subscription.target, message)
        except Exception as exc:
            logger.warning(
                "Push adapter raised",
                merchant_id=str(merchant_id),
                subscription_id=str(subscription.id),
                error=str(exc),
            )
            outcome = {"status": "failed", "error": str(exc)}

        if outcome.get("status") == STATUS_SENT:
            push_log.mark_sent()
            result.succeeded += 1
        else:
            error = outcome.get("error") or "Push delivery failed"
            push_log.mark_failed(error, status_code=outcome.get("status_code"))
            result.failed += 1
            result.errors.append(error)

            if outcome.get("status") == STATUS_GONE:
                subscription.deactivate(reason="gone")
                subscription_repo.add(subscription)
                result.deactivated.append(str(subscription.id))
                logger.info(
                    "Push subscription deactivated",
                    merchant_id=str(merchant_id),
                    subscription_id=str(subscription.id),
                )

        log_repo.add(push_log)

    logger.info(
        "Push fan-out finished",
        merchant_id=str(merchant_id),
        attempted=result.attempted,
        succeeded=result.succeeded,
        failed=result.failed,
    )
    return result
