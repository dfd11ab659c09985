"""Web push channel port: abstract interface for browser/device push delivery."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

STATUS_SENT = "sent"
STATUS_FAILED = "failed"
STATUS_GONE = "gone"  # Endpoint permanently unsubscribed (HTTP 410)


@dataclass(frozen=True)
class PushTarget:
    """Delivery credentials of one registered push subscription."""

    endpoint: str
    p256dh: str
    auth: str


@dataclass(frozen=True)
class PushMessage:
    title: str
    body: str
    url: str = "/"
    icon: str = "/logo.png"
    badge: str = "/badge.png"
    tag: str = "merchant-notification"
    require_interaction: bool = False
    actions: tuple[dict, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "body": self.body,
            "icon": self.icon,
            "badge": self.badge,
            "tag": self.tag,
            "requireInteraction": self.require_interaction,
            "actions": list(self.actions),
            "data": {"url": self.url},
        }


class PushPort(ABC):
    """Abstract interface for push notification adapters."""

    @abstractmethod
    def send(self, target: PushTarget, message: PushMessage) -> dict:
        """Deliver one push message to one subscription.

        Returns:
            dict with keys: message_id, status ("sent", "failed" or "gone"),
            error (optional), status_code (optional)
        """
        ...
