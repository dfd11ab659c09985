"""PushSubscription aggregate: one registered browser/device endpoint.

Subscriptions are deactivated, not deleted, when the push service reports
the endpoint as permanently gone. Only the owning merchant may delete one.
"""

from datetime import UTC, datetime

from notifications.channel.push_port import PushTarget
from notifications.domain import notifications
from notifications.push.events import (
    PushSubscriptionDeactivated,
    PushSubscriptionRefreshed,
    PushSubscriptionRegistered,
)
from protean.fields import Boolean, DateTime, Identifier, String, Text


@notifications.aggregate
class PushSubscription:
    merchant_id: Identifier(required=True)
    endpoint: Text(required=True)
    p256dh: String(max_length=255, required=True)
    auth: String(max_length=255, required=True)
    user_agent: String(max_length=500)

    is_active: Boolean(default=True)
    deactivated_at: DateTime()
    deactivation_reason: String(max_length=255)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, merchant_id, endpoint, p256dh, auth, user_agent=None):
        now = datetime.now(UTC)
        subscription = cls(
            merchant_id=merchant_id,
            endpoint=endpoint,
            p256dh=p256dh,
            auth=auth,
            user_agent=user_agent,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        subscription.raise_(
            PushSubscriptionRegistered(
                subscription_id=str(subscription.id),
                merchant_id=str(merchant_id),
                endpoint=endpoint,
                user_agent=user_agent,
                registered_at=now,
            )
        )
        return subscription

    def refresh(self, merchant_id, p256dh, auth, user_agent=None):
        """Re-registration of a known endpoint: take the new keys and reactivate.

        A browser that signs in as another merchant moves the endpoint to that
        merchant. Returns the previous owner in that case, else None.
        """
        now = datetime.now(UTC)
        previous_owner = str(self.merchant_id) if str(self.merchant_id) != str(merchant_id) else None
        self.merchant_id = merchant_id
        self.p256dh = p256dh
        self.auth = auth
        self.user_agent = user_agent
        self.is_active = True
        self.deactivated_at = None
        self.deactivation_reason = None
        self.updated_at = now

        self.raise_(
            PushSubscriptionRefreshed(
                subscription_id=str(self.id),
                merchant_id=str(merchant_id),
                previous_merchant_id=previous_owner,
                refreshed_at=now,
            )
        )
        return previous_owner

    def deactivate(self, reason="gone"):
        """Stop targeting this endpoint. Deactivating twice is a no-op."""
        if not self.is_active:
            return

        now = datetime.now(UTC)
        self.is_active = False
        self.deactivated_at = now
        self.deactivation_reason = reason
        self.updated_at = now

        self.raise_(
            PushSubscriptionDeactivated(
                subscription_id=str(self.id),
                merchant_id=str(self.merchant_id),
                reason=reason,
                deactivated_at=now,
            )
        )

    @property
    def target(self) -> PushTarget:
        return PushTarget(endpoint=self.endpoint, p256dh=self.p256dh, auth=self.auth)
