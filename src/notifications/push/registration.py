"""Push subscription commands + handler: register, remove, deactivate."""

import structlog
from notifications.domain import notifications
from notifications.push.subscription import PushSubscription
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="PushSubscription")
class RegisterPushSubscription:
    """Register (or re-register) a push endpoint for a merchant."""

    merchant_id: Identifier(required=True)
    endpoint: Text(required=True)
    p256dh: String(required=True, max_length=255)
    auth: String(required=True, max_length=255)
    user_agent: String(max_length=500)


@notifications.command(part_of="PushSubscription")
class RemovePushSubscription:
    """Delete a subscription on the owning merchant's request."""

    merchant_id: Identifier(required=True)
    subscription_id: Identifier(required=True)


@notifications.command(part_of="PushSubscription")
class DeactivatePushSubscription:
    subscription_id: Identifier(required=True)
    reason: String(max_length=255, default="gone")


@notifications.command_handler(part_of=PushSubscription)
class PushSubscriptionHandler:
    @handle(RegisterPushSubscription)
    def register(self, command: RegisterPushSubscription):
        repo = current_domain.repository_for(PushSubscription)
        existing = repo._dao.query.filter(endpoint=command.endpoint).all().items

        if existing:
            subscription = existing[0]
            previous_owner = subscription.refresh(
                merchant_id=str(command.merchant_id),
                p256dh=command.p256dh,
                auth=command.auth,
                user_agent=command.user_agent,
            )
            if previous_owner:
                logger.warning(
                    "Push endpoint moved to another merchant",
                    subscription_id=str(subscription.id),
                    previous_merchant_id=previous_owner,
                    merchant_id=str(command.merchant_id),
                )
        else:
            subscription = PushSubscription.register(
                merchant_id=str(command.merchant_id),
                endpoint=command.endpoint,
                p256dh=command.p256dh,
                auth=command.auth,
                user_agent=command.user_agent,
            )

        repo.add(subscription)
        return str(subscription.id)

    @handle(RemovePushSubscription)
    def remove(self, command: RemovePushSubscription):
        repo = current_domain.repository_for(PushSubscription)
        subscription = repo.get(command.subscription_id)

        if str(subscription.merchant_id) != str(command.merchant_id):
            raise ValidationError({"subscription_id": ["Subscription does not belong to this merchant"]})

        repo._dao.delete(subscription)
        logger.info(
            "Push subscription removed",
            merchant_id=str(command.merchant_id),
            subscription_id=str(command.subscription_id),
        )

    @handle(DeactivatePushSubscription)
    def deactivate(self, command: DeactivatePushSubscription):
        repo = current_domain.repository_for(PushSubscription)
        try:
            subscription = repo.get(command.subscription_id)
        except ObjectNotFoundError:
            logger.warning("Push subscription not found", subscription_id=str(command.subscription_id))
            return
        subscription.deactivate(reason=command.reason)
        repo.add(subscription)
